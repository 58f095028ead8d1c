from .exceptions import ConfigurationError

METHODS = ('median', 'mean')


class EquilibriumEstimator:
    """Reference abundance of every feature, used to center the discrete-time Lotka-Volterra model
    """

    def __init__(self, method='median'):
        """Initialization

        Args:
            method (str, optional): `median` or `mean` across time. Defaults to 'median'.

        Raises:
            ConfigurationError: method is not one of the two recognized values
        """
        if method not in METHODS:
            raise ConfigurationError(
                "equilibrium_method must be 'median' or 'mean', got {!r}".format(method))
        self.method = method

    def estimate(self, series):
        """Equilibrium abundance per feature

        Args:
            series (pandas.DataFrame): time x features abundances of one group

        Returns:
            pandas.Series: one value per feature, indexed by feature name
        """
        if self.method == 'median':
            return series.median(axis=0)
        return series.mean(axis=0)

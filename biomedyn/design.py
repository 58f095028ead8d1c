import numpy as np

from .exceptions import DataError


class Design:
    """Regression inputs of one group

    Row `t` of both matrices describes the transition from time point `t` to `t + 1`.

    Attributes:
        centered (numpy.ndarray): (T-1) x n_features, abundance minus equilibrium at the start of every transition
        response (numpy.ndarray): (T-1) x n_features, column `i` is the log-difference of feature `i`
        feature_names (list[str]): column labels shared by both matrices
    """

    def __init__(self, centered, response, feature_names):
        self.centered = centered
        self.response = response
        self.feature_names = list(feature_names)

    @property
    def num_transitions(self):
        return self.centered.shape[0]

    @property
    def num_features(self):
        return self.centered.shape[1]

    def for_feature(self, i):
        """Design and response used to model feature `i`

        Args:
            i (int): position of the target feature

        Returns:
            numpy.ndarray: (T-1) x n_features centered design
            numpy.ndarray: length T-1 response vector
        """
        return self.centered, self.response[:, i]


class DesignBuilder:
    """Linearize the discrete-time Lotka-Volterra model

    `ln x_i(t+1) - ln x_i(t) = sum_j c_ij (x_j(t) - <x_j>)`
    """

    def build(self, series, equilibrium):
        """Build the centered design and the log-difference responses of one group

        Args:
            series (pandas.DataFrame): time x features abundances, sorted by time
            equilibrium (pandas.Series): equilibrium abundance per feature

        Raises:
            DataError: some abundance is non-finite or not strictly positive

        Returns:
            biomedyn.design.Design
        """
        values = series.to_numpy(dtype=float)
        bad = ~np.isfinite(values) | (values <= 0)
        if bad.any():
            row, col = np.argwhere(bad)[0]
            raise DataError(
                'Abundances must be finite and strictly positive; found {} at sample {!r}, feature {!r}'.format(
                    values[row, col], series.index[row], series.columns[col]))

        reference = equilibrium.reindex(series.columns).to_numpy(dtype=float)
        centered = values[:-1] - reference
        response = np.diff(np.log(values), axis=0)
        return Design(centered, response, series.columns)

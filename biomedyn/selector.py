import numpy as np
from scipy import linalg
from sklearn.metrics import mean_squared_error

from .exceptions import ConfigurationError

# terminal states of one selection run
EXHAUSTED = 'exhausted'
NO_VIABLE_CANDIDATE = 'no_viable_candidate'
BELOW_THRESHOLD = 'below_threshold'
DEGENERATE_ERROR = 'degenerate_error'


class SelectionResult:
    """Outcome of forward selection for one target feature and one train/test split

    Attributes:
        target (int): position of the modelled feature
        active_set (list[int]): selected predictors in order of inclusion, starting with `target`
        coefficients (numpy.ndarray): length n_features, zero outside `active_set`
        accepted_errors (list[float]): held-out error of every accepted step
        stop_reason (str): one of `exhausted, no_viable_candidate, below_threshold, degenerate_error`
    """

    def __init__(self, target, active_set, coefficients, accepted_errors, stop_reason):
        self.target = target
        self.active_set = active_set
        self.coefficients = coefficients
        self.accepted_errors = accepted_errors
        self.stop_reason = stop_reason

    def __repr__(self):
        return 'SelectionResult(target={}, active_set={}, stop_reason={!r})'.format(
            self.target, self.active_set, self.stop_reason)


def least_squares(design, response):
    """Minimum-norm least-squares coefficients through the Moore-Penrose pseudo-inverse

    Args:
        design (numpy.ndarray): rows x columns
        response (numpy.ndarray): length rows

    Returns:
        numpy.ndarray: length columns, all zero when there are no rows
    """
    if design.shape[0] == 0:
        return np.zeros(design.shape[1])
    return linalg.pinv(design) @ response


class ForwardSelector:
    """Greedy stepwise inclusion of interaction terms scored on held-out mean squared error

    Starting from the self-interaction term, every step tries each remaining feature,
    keeps the one with the lowest test error and accepts it if the relative
    improvement `(prev_error - best_error) / prev_error` exceeds `error_threshold`.
    """

    def __init__(self, error_threshold=1e-3, pre_error=10000):
        """Initialization

        Args:
            error_threshold (float, optional): minimum relative improvement to accept a term. Defaults to 1e-3.
            pre_error (float, optional): error of the empty model, a large sentinel. Defaults to 10000.

        Raises:
            ConfigurationError: a parameter is not a positive number
        """
        if not error_threshold > 0:
            raise ConfigurationError(
                'error_threshold must be positive, got {!r}'.format(error_threshold))
        if not pre_error > 0:
            raise ConfigurationError(
                'pre_error must be positive, got {!r}'.format(pre_error))
        self.error_threshold = error_threshold
        self.pre_error = pre_error

    def candidate_error(self, columns, train_design, train_response,
                        test_design, test_response):
        """Held-out error of a least-squares fit restricted to `columns`. Degenerate fits score `numpy.inf`
        """
        x_train = train_design[:, columns]
        if x_train.shape[0] < x_train.shape[1] or test_design.shape[0] == 0:
            return np.inf

        coefs = least_squares(x_train, train_response)
        if not np.all(np.isfinite(coefs)):
            return np.inf

        predicted = test_design[:, columns] @ coefs
        if not np.all(np.isfinite(predicted)):
            return np.inf
        error = mean_squared_error(test_response, predicted)
        if not np.isfinite(error):
            return np.inf
        return error

    def select(self, design, target, train_index, test_index):
        """Run forward selection for one target feature

        Args:
            design (biomedyn.design.Design): regression inputs of the group
            target (int): position of the feature to model
            train_index (numpy.ndarray): transitions used for fitting
            test_index (numpy.ndarray): transitions used for scoring candidates

        Returns:
            biomedyn.selector.SelectionResult
        """
        centered, response = design.for_feature(target)
        train_design, train_response = centered[train_index], response[train_index]
        test_design, test_response = centered[test_index], response[test_index]

        active_set = [target]
        inactive_set = [j for j in range(design.num_features) if j != target]
        prev_error = self.pre_error
        accepted_errors = []
        stop_reason = EXHAUSTED

        while inactive_set:
            errors = np.array([
                self.candidate_error(active_set + [j], train_design, train_response,
                                     test_design, test_response)
                for j in inactive_set])

            if np.all(np.isinf(errors)):
                stop_reason = NO_VIABLE_CANDIDATE
                break

            # argmin keeps the lowest feature index on ties
            best = int(np.argmin(errors))
            best_error = errors[best]

            if not (np.isfinite(prev_error) and prev_error > 0 and best_error >= 0):
                stop_reason = DEGENERATE_ERROR
                break
            if (prev_error - best_error) / prev_error <= self.error_threshold:
                stop_reason = BELOW_THRESHOLD
                break

            active_set.append(inactive_set.pop(best))
            accepted_errors.append(float(best_error))
            prev_error = best_error

        coefficients = np.zeros(design.num_features)
        coefficients[active_set] = least_squares(
            train_design[:, active_set], train_response)
        return SelectionResult(target, active_set, coefficients,
                               accepted_errors, stop_reason)

import numbers

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from .exceptions import ConfigurationError


def split_transitions(num_transitions, replicate):
    """Random train/test split of the transitions for one bootstrap replicate

    The generator is seeded by the replicate number alone, so a replicate draws the
    same split for every group, every feature and every worker layout.

    Args:
        num_transitions (int): number of time steps T-1 in the group
        replicate (int): zero-based replicate number

    Returns:
        numpy.ndarray: sorted training indices, `floor(num_transitions / 2)` of them
        numpy.ndarray: sorted test indices, the complement
    """
    rng = np.random.default_rng(replicate + 1)
    train = np.sort(rng.choice(num_transitions, size=num_transitions // 2, replace=False))
    test = np.setdiff1d(np.arange(num_transitions), train)
    return train, test


def _run_replicate(selector, design, replicate):
    train, test = split_transitions(design.num_transitions, replicate)
    block = np.zeros((design.num_features, design.num_features))
    for i in range(design.num_features):
        block[:, i] = selector.select(design, i, train, test).coefficients
    return replicate, block


class BootstrapAggregator:
    """Bagging of forward selection over repeated random train/test splits

    Every replicate re-runs `ForwardSelector` for each feature; column `i` of slice `b`
    of the coefficient tensor holds the effects on feature `i` estimated in replicate `b`.
    The final interaction matrix is the element-wise median across replicates.
    """

    def __init__(self, selector, num_iterations=10, decimals=4, n_jobs=1):
        """Initialization

        Args:
            selector (biomedyn.selector.ForwardSelector): per-feature estimation unit
            num_iterations (int, optional): number of bootstrap replicates. Defaults to 10.
            decimals (int, optional): rounding of the final matrix. Defaults to 4.
            n_jobs (int, optional): replicates run in parallel through `joblib`; 1 runs sequentially. Defaults to 1.

        Raises:
            ConfigurationError: num_iterations is not a positive integer or decimals is negative
        """
        if (isinstance(num_iterations, bool)
                or not isinstance(num_iterations, numbers.Integral)
                or num_iterations < 1):
            raise ConfigurationError(
                'num_iterations must be a positive integer, got {!r}'.format(num_iterations))
        if not isinstance(decimals, numbers.Integral) or decimals < 0:
            raise ConfigurationError(
                'decimals must be a non-negative integer, got {!r}'.format(decimals))
        self.selector = selector
        self.num_iterations = int(num_iterations)
        self.decimals = int(decimals)
        self.n_jobs = n_jobs

    def run(self, design):
        """Estimate the interaction coefficients of one group

        Args:
            design (biomedyn.design.Design): regression inputs of the group

        Returns:
            numpy.ndarray: features x features x num_iterations coefficient tensor
            pandas.DataFrame: features x features median interaction matrix, labelled by feature name
        """
        n = design.num_features
        tensor = np.zeros((n, n, self.num_iterations))

        blocks = Parallel(n_jobs=self.n_jobs)(
            delayed(_run_replicate)(self.selector, design, b)
            for b in range(self.num_iterations))
        for b, block in blocks:
            tensor[:, :, b] = block

        return tensor, self.aggregate(tensor, design.feature_names)

    def aggregate(self, tensor, feature_names):
        """Collapse the coefficient tensor by element-wise median, ignoring non-finite entries

        Args:
            tensor (numpy.ndarray): features x features x iterations
            feature_names (list[str]): row and column labels

        Returns:
            pandas.DataFrame: rounded median interaction matrix
        """
        finite = np.where(np.isfinite(tensor), tensor, np.nan)
        if finite.shape[0] == 0:
            median = np.zeros(finite.shape[:2])
        else:
            median = np.nanmedian(finite, axis=2)
        median = np.round(median, self.decimals)
        return pd.DataFrame(median, index=list(feature_names), columns=list(feature_names))

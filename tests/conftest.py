import numpy as np
import pandas as pd
import pytest


@pytest.fixture()
def rng():
    return np.random.default_rng(42)


@pytest.fixture()
def planted_data(rng):
    """Three features over six time points. `A` oscillates on a 2-cycle around its
    median 3 and is driven only by itself with coefficient -ln 2; `B` and `C` are noise.
    """
    samples = ['S{}'.format(k) for k in range(1, 7)]
    data = pd.DataFrame(
        [[2.0, 4.0, 2.0, 4.0, 2.0, 4.0],
         rng.uniform(1.0, 5.0, 6),
         rng.uniform(1.0, 5.0, 6)],
        index=['A', 'B', 'C'], columns=samples)
    metadata = pd.DataFrame({'Group': 'G1', 'Time': range(1, 7)}, index=samples)
    return data, metadata


@pytest.fixture()
def two_group_data():
    """Ten features, two groups of five samples with shuffled sampling times."""
    rng = np.random.default_rng(123)
    samples = ['Sample{}'.format(k) for k in range(1, 11)]
    features = ['Feature{}'.format(k) for k in range(1, 11)]
    data = pd.DataFrame(rng.integers(1, 101, size=(10, 10)).astype(float),
                        index=features, columns=samples)
    metadata = pd.DataFrame({
        'Group': ['A'] * 5 + ['B'] * 5,
        'Time': [3, 1, 2, 5, 4, 1, 2, 3, 4, 5]},
        index=samples)
    return data, metadata

import networkx as nx
import numpy as np
import pandas as pd
import pytest

from biomedyn import bootstrap
from biomedyn.exceptions import ConfigurationError, DataError
from biomedyn.interaction import InteractionResult, InteractionResultStore


def _fit(data, metadata, **kwargs):
    kwargs.setdefault('num_iterations', 5)
    return InteractionResultStore(data, metadata, 'Group', **kwargs).fit()


# ------------------------------------------------------------------ #
# Configuration
# ------------------------------------------------------------------ #


class TestConfiguration:
    def test_invalid_equilibrium_method_fails_before_bootstrap(
            self, two_group_data, monkeypatch) -> None:
        def _fail(*args, **kwargs):
            raise AssertionError('bootstrap loop must not run')

        monkeypatch.setattr(bootstrap.BootstrapAggregator, 'run', _fail)
        data, metadata = two_group_data
        with pytest.raises(ConfigurationError, match="'median' or 'mean'"):
            InteractionResultStore(data, metadata, 'Group', equilibrium_method='mode')

    @pytest.mark.parametrize(
        ('kwargs', 'match'),
        [
            ({'num_iterations': 0}, 'num_iterations'),
            ({'error_threshold': -1.0}, 'error_threshold'),
            ({'pre_error': 0.0}, 'pre_error'),
            ({'pseudocount': -1.0}, 'pseudocount'),
            ({'decimals': -2}, 'decimals'),
        ],
    )
    def test_invalid_parameters_raise(self, two_group_data, kwargs, match) -> None:
        data, metadata = two_group_data
        with pytest.raises(ConfigurationError, match=match):
            InteractionResultStore(data, metadata, 'Group', **kwargs)

    def test_zero_abundance_without_pseudocount_raises(self, two_group_data) -> None:
        data, metadata = two_group_data
        data.iloc[0, 0] = 0.0
        with pytest.raises(DataError, match='strictly positive'):
            _fit(data, metadata, pseudocount=0.0)


# ------------------------------------------------------------------ #
# Results
# ------------------------------------------------------------------ #


class TestResults:
    def test_one_result_per_group(self, two_group_data) -> None:
        store = _fit(*two_group_data, num_iterations=2)
        assert len(store) == 2
        assert store.groups == ['A', 'B']
        assert 'A' in store
        assert list(store) == ['A', 'B']
        assert isinstance(store['A'], InteractionResult)

    def test_square_labelled_matrices(self, two_group_data) -> None:
        data, metadata = two_group_data
        store = _fit(data, metadata)
        for group in store:
            final = store[group].final_interaction_matrix
            assert final.shape == (10, 10)
            assert list(final.index) == list(final.columns) == list(data.index)
            assert store[group].interaction_tensor.shape == (10, 10, 5)

    def test_groups_are_independent(self, two_group_data) -> None:
        data, metadata = two_group_data
        both = _fit(data, metadata)
        only_a = _fit(data, metadata[metadata.Group == 'A'])
        np.testing.assert_array_equal(
            both['A'].interaction_tensor, only_a['A'].interaction_tensor)
        pd.testing.assert_frame_equal(
            both['A'].final_interaction_matrix, only_a['A'].final_interaction_matrix)

    def test_deterministic(self, two_group_data) -> None:
        first = _fit(*two_group_data)
        second = _fit(*two_group_data)
        for group in first:
            np.testing.assert_array_equal(
                first[group].interaction_tensor, second[group].interaction_tensor)
            pd.testing.assert_frame_equal(
                first[group].final_interaction_matrix,
                second[group].final_interaction_matrix)

    def test_single_iteration(self, two_group_data) -> None:
        store = _fit(*two_group_data, num_iterations=1)
        for group in store:
            result = store[group]
            np.testing.assert_array_equal(
                result.final_interaction_matrix.to_numpy(),
                np.round(result.interaction_tensor[:, :, 0], 4))

    def test_equilibrium_is_median_of_shifted_series(self, two_group_data) -> None:
        data, metadata = two_group_data
        store = _fit(data, metadata, num_iterations=1)
        samples = metadata.index[metadata.Group == 'B']
        expected = (data[samples] + 1).median(axis=1)
        pd.testing.assert_series_equal(store['B'].equilibrium, expected, check_names=False)


class TestPlantedInteractions:
    def test_self_driven_feature_has_no_partners(self, planted_data) -> None:
        store = _fit(*planted_data, pseudocount=0.0, error_threshold=1e-3)
        final = store['G1'].final_interaction_matrix
        assert final.loc['A', 'A'] == pytest.approx(-np.log(2), abs=1e-3)
        assert abs(final.loc['B', 'A']) < 1e-6
        assert abs(final.loc['C', 'A']) < 1e-6

    @pytest.mark.parametrize('method', ['median', 'mean'])
    def test_constant_feature_does_not_raise(self, planted_data, method) -> None:
        data, metadata = planted_data
        data.loc['B'] = 2.5
        store = _fit(data, metadata, equilibrium_method=method)
        result = store['G1']
        np.testing.assert_array_equal(result.interaction_tensor[:, 1, :], 0.0)
        assert np.all(result.final_interaction_matrix['B'] == 0.0)

    def test_short_group_warns_and_is_zero(self, planted_data) -> None:
        data, metadata = planted_data
        metadata = metadata.assign(Group=['G1'] * 4 + ['G2'] * 2)
        with pytest.warns(UserWarning, match='2 time points'):
            store = _fit(data, metadata)
        np.testing.assert_array_equal(store['G2'].interaction_tensor, 0.0)


# ------------------------------------------------------------------ #
# Reporting and export
# ------------------------------------------------------------------ #


class TestExport:
    def test_edges_exclude_diagonal_and_small_weights(self, two_group_data) -> None:
        store = _fit(*two_group_data)
        edges = store.edges(threshold=0.001)
        assert list(edges.columns) == ['group', 'src', 'tgt', 'weight']
        assert not (edges.src == edges.tgt).any()
        assert (edges.weight.abs() > 0.001).all()

    def test_edges_match_matrix(self, two_group_data) -> None:
        store = _fit(*two_group_data)
        final = store['A'].final_interaction_matrix
        for edge in store['A'].edges().itertuples(index=False):
            assert final.loc[edge.src, edge.tgt] == edge.weight
        off_diagonal = final.to_numpy()[~np.eye(10, dtype=bool)]
        assert len(store['A'].edges()) == np.count_nonzero(off_diagonal)

    @pytest.mark.parametrize('name', ['src', 'tgt', 'weight'])
    def test_feature_named_like_edge_column(self, two_group_data, name) -> None:
        data, metadata = two_group_data
        data = data.rename(index={'Feature1': name})
        store = _fit(data, metadata)
        edges = store['A'].edges()
        final = store['A'].final_interaction_matrix
        assert list(edges.columns) == ['src', 'tgt', 'weight']
        off_diagonal = final.to_numpy()[~np.eye(10, dtype=bool)]
        assert len(edges) == np.count_nonzero(off_diagonal)
        for edge in edges.itertuples(index=False):
            assert final.loc[edge.src, edge.tgt] == edge.weight
        assert store.summary().features.tolist() == [10, 10]
        assert name in store.to_network('A')

    def test_summary(self, two_group_data) -> None:
        store = _fit(*two_group_data)
        summary = store.summary()
        assert list(summary.group) == ['A', 'B']
        assert list(summary.features) == [10, 10]
        assert list(summary.time_points) == [5, 5]
        assert (summary.interactions == summary.positive + summary.negative).all()

    def test_empty_store(self, two_group_data) -> None:
        store = InteractionResultStore(*two_group_data, group_column='Group')
        assert len(store) == 0
        assert store.edges().empty
        assert store.summary().empty
        assert 'groups=0' in repr(store)

    def test_to_csv(self, two_group_data, tmp_path) -> None:
        store = _fit(*two_group_data)
        path = tmp_path / 'edges.csv'
        store.to_csv(path, index=False)
        loaded = pd.read_csv(path)
        assert len(loaded) == len(store.edges())

    def test_to_network(self, two_group_data) -> None:
        store = _fit(*two_group_data)
        G = store.to_network('A', threshold=0.001)
        assert isinstance(G, nx.DiGraph)
        assert G.number_of_nodes() == 10
        final = store['A'].final_interaction_matrix
        for src, tgt, attrs in G.edges(data=True):
            assert attrs['weight'] == final.loc[src, tgt]
            assert attrs['sign'] == np.sign(final.loc[src, tgt])

    def test_to_dot(self, two_group_data, tmp_path) -> None:
        pytest.importorskip('pygraphviz')
        store = _fit(*two_group_data)
        path = tmp_path / 'A.dot'
        store.to_dot('A', filename=str(path))
        assert path.read_text().lstrip().startswith(('digraph', 'strict digraph'))

import warnings

import networkx as nx
import numpy as np
import pandas as pd
from tqdm import tqdm

from .bootstrap import BootstrapAggregator
from .data_formatter import DataFormatter
from .design import DesignBuilder
from .equilibrium import EquilibriumEstimator
from .exceptions import ConfigurationError
from .selector import ForwardSelector


class InteractionResult:
    """Inferred interactions of one group

    Attributes:
        group: group key
        interaction_tensor (numpy.ndarray): features x features x iterations, entry `[j, i, b]` is the effect of `j` on `i` in replicate `b`
        final_interaction_matrix (pandas.DataFrame): median over replicates, rows are sources and columns targets
        equilibrium (pandas.Series): equilibrium abundance used to center the model
        num_time_points (int): number of samples in the group
    """

    def __init__(self, group, interaction_tensor, final_interaction_matrix,
                 equilibrium, num_time_points):
        self.group = group
        self.interaction_tensor = interaction_tensor
        self.final_interaction_matrix = final_interaction_matrix
        self.equilibrium = equilibrium
        self.num_time_points = num_time_points

    @property
    def feature_names(self):
        return list(self.final_interaction_matrix.index)

    def edges(self, threshold=0.0):
        """Directed off-diagonal interactions whose absolute coefficient exceeds `threshold`

        Output format:

        | src          | tgt              |   weight |
        |:-------------|:-----------------|---------:|
        | Bacteroidota | Actinobacteriota |  -0.0412 |
        | Firmicutes   | Bacteroidota     |   0.0127 |

        Args:
            threshold (float, optional): coefficients with absolute value at most this are dropped. Defaults to 0.0.

        Returns:
            pandas.DataFrame: see format above
        """
        matrix = self.final_interaction_matrix
        values = matrix.to_numpy()
        # positional, so feature names never collide with the output columns
        mask = ~np.eye(values.shape[0], dtype=bool) & (np.abs(values) > threshold)
        rows, cols = np.nonzero(mask)
        return pd.DataFrame({
            'src': matrix.index[rows],
            'tgt': matrix.columns[cols],
            'weight': values[rows, cols]})

    def __repr__(self):
        return 'InteractionResult(group={!r}, features={}, iterations={})'.format(
            self.group, len(self.feature_names), self.interaction_tensor.shape[2])


class InteractionResultStore:
    """Infer species interactions per group from microbiome time series

    Implements the discrete-time Lotka-Volterra model

    $$ \\ln x_i(t+1) - \\ln x_i(t) = \\sum_j c_{ij} (x_j(t) - <x_j>) $$

    where \\( <x_j> \\) is the equilibrium abundance of feature \\( j \\) in the group.
    Coefficients are estimated by forward stepwise regression scored on a held-out split,
    repeated over bootstrap replicates and aggregated by element-wise median. Groups never
    share data or intermediate state.

    Results are accessed by group key: `store[group].final_interaction_matrix`.
    """

    def __init__(self,
                 data,
                 metadata,
                 group_column,
                 time_column='Time',
                 equilibrium_method='median',
                 num_iterations=10,
                 error_threshold=1e-3,
                 pre_error=10000,
                 pseudocount=1.0,
                 decimals=4,
                 n_jobs=1,
                 verbose=False):
        """Initialization. All parameters are validated here, before any group is processed

        Args:
            data (pandas.DataFrame): transformed abundances, features as rows and samples as columns
            metadata (pandas.DataFrame): indexed by sample id, holding `group_column` and `time_column`
            group_column (str): metadata column defining the groups analysed independently
            time_column (str, optional): metadata column with the sampling time. Defaults to 'Time'.
            equilibrium_method (str, optional): `median` or `mean`. Defaults to 'median'.
            num_iterations (int, optional): number of bootstrap replicates. Defaults to 10.
            error_threshold (float, optional): relative error improvement needed to add a term. Defaults to 1e-3.
            pre_error (float, optional): initial (large) error the first candidate is compared against. Defaults to 10000.
            pseudocount (float, optional): added to every abundance before taking logs; 0 if already shifted. Defaults to 1.0.
            decimals (int, optional): rounding of the final matrices. Defaults to 4.
            n_jobs (int, optional): parallel replicates passed to `joblib`. Defaults to 1.
            verbose (bool, optional): print group summaries and show a progress bar. Defaults to False.

        Raises:
            ConfigurationError: some parameter is invalid
        """
        if not np.isfinite(pseudocount) or pseudocount < 0:
            raise ConfigurationError(
                'pseudocount must be a finite non-negative number, got {!r}'.format(pseudocount))

        self.data = data
        self.metadata = metadata
        self.group_column = group_column
        self.time_column = time_column
        self.pseudocount = pseudocount
        self.verbose = verbose

        self.formatter = DataFormatter(verbose=verbose)
        self.estimator = EquilibriumEstimator(equilibrium_method)
        self.builder = DesignBuilder()
        self.aggregator = BootstrapAggregator(
            ForwardSelector(error_threshold=error_threshold, pre_error=pre_error),
            num_iterations=num_iterations,
            decimals=decimals,
            n_jobs=n_jobs)

        self.results = {}
        """key-value pairs `{group: InteractionResult}`"""

    def fit(self):
        """Run the inference for every group in the metadata. Populates `self.results`

        Returns:
            biomedyn.interaction.InteractionResultStore: self
        """
        groups = self.formatter.split_groups(
            self.data, self.metadata, self.group_column,
            time_column=self.time_column, pseudocount=self.pseudocount)

        results = {}
        for group, series in tqdm(groups, disable=not self.verbose):
            results[group] = self._fit_group(group, series)
        self.results = results
        return self

    def _fit_group(self, group, series):
        if series.shape[0] < 3:
            warnings.warn(
                'Group {!r} has {} time points; at least 3 are needed to split transitions '
                'into training and test sets, all coefficients will be zero'.format(
                    group, series.shape[0]))
        equilibrium = self.estimator.estimate(series)
        design = self.builder.build(series, equilibrium)
        tensor, final = self.aggregator.run(design)
        return InteractionResult(group, tensor, final, equilibrium, series.shape[0])

    @property
    def groups(self):
        return list(self.results)

    def __getitem__(self, group):
        return self.results[group]

    def __iter__(self):
        return iter(self.results)

    def __len__(self):
        return len(self.results)

    def __contains__(self, group):
        return group in self.results

    def __repr__(self):
        return 'InteractionResultStore(groups={}, num_iterations={}, equilibrium_method={!r})'.format(
            len(self.results), self.aggregator.num_iterations, self.estimator.method)

    def summary(self):
        """Per-group overview of the inferred interactions

        Output format:

        | group   |   features |   time_points |   interactions |   positive |   negative |
        |:--------|-----------:|--------------:|---------------:|-----------:|-----------:|
        | A       |         10 |             5 |             14 |          6 |          8 |

        Returns:
            pandas.DataFrame: see format above
        """
        rows = []
        for group, result in self.results.items():
            edges = result.edges()
            rows.append({
                'group': group,
                'features': len(result.feature_names),
                'time_points': result.num_time_points,
                'interactions': len(edges),
                'positive': int((edges.weight > 0).sum()),
                'negative': int((edges.weight < 0).sum()),
            })
        columns = ['group', 'features', 'time_points', 'interactions', 'positive', 'negative']
        return pd.DataFrame(rows, columns=columns)

    def edges(self, threshold=0.0):
        """Directed interactions of all groups, see `InteractionResult.edges`

        Args:
            threshold (float, optional): coefficients with absolute value at most this are dropped. Defaults to 0.0.

        Returns:
            pandas.DataFrame: columns `group, src, tgt, weight`
        """
        frames = []
        for group, result in self.results.items():
            df = result.edges(threshold)
            df.insert(0, 'group', group)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=['group', 'src', 'tgt', 'weight'])
        return pd.concat(frames, ignore_index=True)

    def to_csv(self, *args, threshold=0.0, **kwargs):
        """Output csv of the interactions of all groups. Arguments are passed to pandas.DataFrame.to_csv()

        Args:
          *args: optional arguments to [pandas.to_csv()]( https://pandas.pydata.org/docs/reference/api/pandas.DataFrame.to_csv.html)
          threshold (float, optional): see `self.edges`. Defaults to 0.0.
          **kwargs: optional keywords to [pandas.to_csv()]( https://pandas.pydata.org/docs/reference/api/pandas.DataFrame.to_csv.html)
        """
        return self.edges(threshold).to_csv(*args, **kwargs)

    def to_network(self, group, threshold=0.0):
        """Directed interaction network of one group. Every feature is a node; edges carry
        `weight` and `sign` (+1 promotes, -1 inhibits the target)

        Args:
            group: group key
            threshold (float, optional): see `self.edges`. Defaults to 0.0.

        Returns:
            networkx.DiGraph
        """
        result = self.results[group]
        G = nx.DiGraph()
        G.add_nodes_from(result.feature_names)
        for edge in result.edges(threshold).itertuples(index=False):
            G.add_edge(edge.src, edge.tgt, weight=float(edge.weight),
                       sign=int(np.sign(edge.weight)))
        return G

    def to_dot(self, group, filename='tmp.dot', threshold=0.0):
        """Output dot file of the interaction network of one group. Requires pygraphviz

        Args:
          group: group key
          filename (str, optional): filename of dot output (Default value = 'tmp.dot')
          threshold (float, optional): see `self.edges` (Default value = 0.0)
        """
        from networkx.drawing.nx_agraph import write_dot
        write_dot(self.to_network(group, threshold), filename)

from .exceptions import DataError


class DataFormatter:
    """Shape transformed abundance tables into the per-group time series the interaction model consumes
    """

    def __init__(self, verbose=False):
        """Initialization

        Args:
            verbose (bool, optional): print a short summary of every split. Defaults to False.
        """
        self.verbose = verbose

    def pivot_into_feature_format(self, data):
        """Pivot a long table into an abundance matrix with features as rows

        Input format:

        | sample_id   | variable         |    value |
        |:------------|:-----------------|---------:|
        | S1          | Actinobacteriota | 0.36665  |
        | S1          | Bacteroidota     | 0.507248 |
        | S2          | Actinobacteriota | 0.002032 |

        Output format:

        | variable         |       S1 |       S2 |
        |:-----------------|---------:|---------:|
        | Actinobacteriota | 0.36665  | 0.002032 |
        | Bacteroidota     | 0.507248 |      nan |

        Args:
            data (pandas.DataFrame): see format above

        Raises:
            DataError: a column is missing or a (sample_id, variable) pair appears more than once

        Returns:
            pandas.DataFrame: see format above
        """
        missing = {'sample_id', 'variable', 'value'} - set(data.columns)
        if missing:
            raise DataError('Long table is missing columns: {}'.format(sorted(missing)))
        duplicated = data.duplicated(subset=['sample_id', 'variable'])
        if duplicated.any():
            first = data[duplicated].iloc[0]
            raise DataError('{} duplicate (sample_id, variable) rows, ex. ({!r}, {!r})'.format(
                int(duplicated.sum()), first.sample_id, first.variable))
        pivoted = data.pivot_table(
            index='variable', columns='sample_id', values='value', sort=False)
        pivoted.columns.name = None
        return pivoted

    def melt_into_long_format(self, data):
        """Inverse of `self.pivot_into_feature_format`

        Args:
            data (pandas.DataFrame): features as rows, samples as columns

        Returns:
            pandas.DataFrame: long table with columns `sample_id, variable, value`
        """
        melted = data.rename_axis('variable').reset_index().melt(
            id_vars='variable', var_name='sample_id', value_name='value')
        return melted[['sample_id', 'variable', 'value']]

    def split_groups(self, data, metadata, group_column, time_column='Time',
                     pseudocount=1.0):
        """Slice the abundance matrix into one time-ordered series per group

        Groups come out in the order they first appear in `metadata`. Within a
        group, samples are sorted ascending by `time_column` (ties keep metadata order).

        Output format for one group (rows are samples, columns are features):

        | sample_id   |   Actinobacteriota |   Bacteroidota |
        |:------------|-------------------:|---------------:|
        | S1          |           1.36665  |       1.507248 |
        | S2          |           1.002032 |       1.005058 |

        Args:
            data (pandas.DataFrame): abundance matrix, features as rows and samples as columns
            metadata (pandas.DataFrame): indexed by sample id, holding `group_column` and `time_column`
            group_column (str): column in `metadata` naming the group of every sample
            time_column (str, optional): column in `metadata` holding the sampling time. Defaults to 'Time'.
            pseudocount (float, optional): added to every abundance so that log-differences are defined. Defaults to 1.0.

        Raises:
            DataError: a column is missing or has missing values, or a sample has no abundance column

        Returns:
            list[tuple]: `(group, pandas.DataFrame)` pairs, see format above
        """
        for column in (group_column, time_column):
            if column not in metadata.columns:
                raise DataError('Column {!r} not found in metadata'.format(column))
            if metadata[column].isna().any():
                raise DataError('{} samples have no value in metadata column {!r}, ex. {!r}'.format(
                    int(metadata[column].isna().sum()), column,
                    metadata.index[metadata[column].isna()][0]))

        missing = metadata.index.difference(data.columns)
        if len(missing) > 0:
            raise DataError('{} samples in metadata have no abundance column, ex. {!r}'.format(
                len(missing), missing[0]))

        groups = []
        for group in metadata[group_column].unique():
            group_info = metadata[metadata[group_column] == group]
            group_info = group_info.sort_values(by=time_column, kind='mergesort')
            series = data[group_info.index].T.astype(float) + pseudocount
            series.index.name = 'sample_id'
            groups.append((group, series))

        if self.verbose:
            print('There are {} groups and {} features'.format(
                len(groups), data.shape[0]))
            for group, series in groups:
                print('Group {}: {} time points'.format(group, series.shape[0]))
        return groups

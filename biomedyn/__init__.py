"""
# Species Interaction Inference From Microbiome Time Series:

Description:
    Directed interaction strengths among co-measured taxa, inferred from their abundance
    trajectories with a discrete-time Lotka-Volterra model, forward stepwise regression
    and bagging

---

## Installation:
   ```
      pip install biomedyn
   ```
   or
   ```
      pip3 install biomedyn --user
   ```

## Notes:
   Input abundances are expected to be transformed already (ex. by a log-ratio transform).
   A pseudocount of 1 is added before inference unless `pseudocount=0` is passed.
   Writing dot files with `InteractionResultStore.to_dot` requires
   [pygraphviz](https://pygraphviz.github.io/), which is not installed automatically
   (`pip install biomedyn[graphviz]`).

---

## Examples:
   ```
      from biomedyn import InteractionResultStore
      store = InteractionResultStore(data, metadata, group_column='Group',
                                     num_iterations=20).fit()
      store['A'].final_interaction_matrix
      store.edges(threshold=0.01)
   ```

---

## FAQ:
  + <u>`ConfigurationError` before anything runs:</u> `equilibrium_method` must be `median` or `mean`; `num_iterations` must be a positive integer and `error_threshold`, `pre_error` positive numbers.
  + <u>`DataError` about strictly positive abundances:</u> log-differences are undefined for zero or negative values. Use a positive `pseudocount`.
  + <u>All coefficients of a group are zero:</u> the group has fewer than 3 time points, so no training split can fit an interaction term.

---
"""
from .bootstrap import BootstrapAggregator, split_transitions
from .data_formatter import DataFormatter
from .design import Design, DesignBuilder
from .equilibrium import EquilibriumEstimator
from .exceptions import BiomedynError, ConfigurationError, DataError
from .interaction import InteractionResult, InteractionResultStore
from .selector import ForwardSelector, SelectionResult

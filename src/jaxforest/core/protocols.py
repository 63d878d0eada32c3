"""
Core protocols (interfaces) for jaxforest.

The routing functions delegate two numeric decisions to swappable callables:
- which input features a node may look at (FeatureSelector)
- how those features become a left-branch probability (SplitProbabilityFn)

Plain functions satisfy these protocols; no inheritance required. Both must be
pure and traceable by JAX, since the routing kernels vmap and jit over them.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from jax import Array


@runtime_checkable
class FeatureSelector(Protocol):
    """Protocol for deterministic feature subset selection.

    Identical arguments must always give the identical subset.
    """

    def __call__(
        self,
        layer_num: int,
        index: Array | int,
        random_seed: int,
        num_features: int,
        num_features_per_node: int,
    ) -> Array:
        """Return feature indices, shape (num_features_per_node,), in [0, num_features)."""
        ...


@runtime_checkable
class SplitProbabilityFn(Protocol):
    """Protocol for node split probabilities.

    Maps one input row and one node's logistic parameters to the probability
    of taking the left branch.
    """

    def __call__(
        self,
        point: Array,
        feature_set: Array,
        weights: Array,
        bias: Array,
        num_features: int,
        num_features_per_node: int,
    ) -> Array:
        """Return the left-branch probability, a scalar in [0, 1]."""
        ...

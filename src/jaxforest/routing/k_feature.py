"""K-feature routing function.

The routing function of a soft decision tree whose decisions each look at
only ``num_features_per_node`` of the input features: the probability that
an input reaches each node of the tree, as in 'Deep Neural Decision Forests'
(Kontschieder et al.).

Each decision node j sends the probability mass arriving at it to its
children 2j+1 and 2j+2 in proportion sigmoid(w_j . x[S] - b_j), where S is
the feature subset drawn by the feature selector.

Note: the feature subset is keyed on the input's row index, not the node
index, so every node of the tree sees the same subset for a given input.
This reproduces the reference routing probabilities and is kept as is.
"""

from __future__ import annotations

from functools import partial
from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from jaxforest.core.config import RoutingConfig
from jaxforest.core.protocols import FeatureSelector, SplitProbabilityFn
from jaxforest.features import get_feature_set
from jaxforest.routing.base import BaseRoutingFunction
from jaxforest.routing.soft import left_probability_k
from jaxforest.structures import propagate_routing


class KFeatureTreeParams(NamedTuple):
    """Parameters for a k-feature soft decision tree.

    Attributes:
        weights: Logistic weights, shape (num_internal, num_features_per_node).
        biases: Logistic biases, shape (num_internal,).
    """

    weights: Array  # (num_internal, num_features_per_node)
    biases: Array  # (num_internal,)


@partial(
    jax.jit,
    static_argnames=(
        "layer_num",
        "max_nodes",
        "num_features_per_node",
        "random_seed",
        "feature_selector",
        "split_probability",
    ),
)
def k_feature_routing(
    x: Array,
    row_indices: Array,
    tree_parameters: Array,
    tree_biases: Array,
    *,
    layer_num: int,
    max_nodes: int,
    num_features_per_node: int,
    random_seed: int,
    feature_selector: FeatureSelector = get_feature_set,
    split_probability: SplitProbabilityFn = left_probability_k,
) -> Array:
    """Routing probabilities for a block of rows.

    Args:
        x: Input features, shape (batch, num_features).
        row_indices: Index of each row in the full batch, shape (batch,).
            These key the feature selection.
        tree_parameters: Weights, shape (max_nodes // 2, num_features_per_node).
        tree_biases: Biases, shape (max_nodes // 2,).
        layer_num: Layer number of the tree.
        max_nodes: Tree capacity.
        num_features_per_node: Features per decision.
        random_seed: Base seed for feature selection.
        feature_selector: Deterministic feature subset selector.
        split_probability: Left-branch probability of one node.

    Returns:
        Routing probabilities, shape (batch, max_nodes).
    """
    num_features = x.shape[1]

    # The subset depends only on the row, so it is drawn once per row.
    feature_sets = jax.vmap(
        lambda i: feature_selector(
            layer_num, i, random_seed, num_features, num_features_per_node
        )
    )(row_indices)  # (batch, k)

    def row_left_probs(point: Array, feature_set: Array) -> Array:
        return jax.vmap(
            lambda w, b: split_probability(
                point, feature_set, w, b, num_features, num_features_per_node
            )
        )(tree_parameters, tree_biases)  # (num_internal,)

    left_probs = jax.vmap(row_left_probs)(x, feature_sets)  # (batch, num_internal)
    return propagate_routing(left_probs, max_nodes)


class KFeatureRoutingFunction(BaseRoutingFunction):
    """Routing function of a soft tree with k features per decision.

    Example:
        >>> config = RoutingConfig(max_nodes=7, num_features_per_node=2)
        >>> routing = KFeatureRoutingFunction(config)
        >>> params = routing.init_params(jax.random.PRNGKey(0))
        >>> probs = routing(X, params.weights, params.biases)  # (n, 7)
    """

    def __init__(
        self,
        config: RoutingConfig | None = None,
        feature_selector: FeatureSelector = get_feature_set,
        split_probability: SplitProbabilityFn = left_probability_k,
    ) -> None:
        """Initialize routing function.

        Args:
            config: Tree and execution configuration. If None, uses defaults.
            feature_selector: Deterministic feature subset selector. Must be
                traceable by JAX.
            split_probability: Left-branch probability of one node. Must be
                traceable by JAX.
        """
        super().__init__(config)
        if not callable(feature_selector):
            raise TypeError("feature_selector must be callable")
        if not callable(split_probability):
            raise TypeError("split_probability must be callable")
        self.feature_selector = feature_selector
        self.split_probability = split_probability

    def init_params(
        self,
        key: Array,
        num_features: int | None = None,
        init_scale: float = 0.1,
    ) -> KFeatureTreeParams:
        """Initialize tree parameters.

        Args:
            key: JAX PRNG key.
            num_features: Ignored (weights are per selected feature). Kept for
                API consistency.
            init_scale: Scale of the normal initialisation.

        Returns:
            Initialized parameters.
        """
        num_internal = self.config.num_internal_nodes
        keys = jax.random.split(key, 2)
        weights = jax.random.normal(
            keys[0], (num_internal, self.config.num_features_per_node)
        ) * init_scale
        biases = jax.random.normal(keys[1], (num_internal,)) * init_scale
        return KFeatureTreeParams(weights=weights, biases=biases)

    def feature_set(self, index: int, num_features: int) -> np.ndarray:
        """Feature subset used by every decision for input row ``index``."""
        config = self.config
        return np.asarray(
            self.feature_selector(
                config.layer_num,
                index,
                config.random_seed,
                num_features,
                config.num_features_per_node,
            )
        )

    def _check_params(
        self, tree_parameters: np.ndarray, tree_biases: np.ndarray, num_features: int
    ) -> None:
        num_internal = self.config.num_internal_nodes
        k = self.config.num_features_per_node
        if (
            tree_parameters.ndim != 2
            or tree_parameters.shape[0] < num_internal
            or tree_parameters.shape[1] != k
        ):
            raise ValueError(
                f"tree_parameters should have shape ({num_internal}, {k}), "
                f"got {tree_parameters.shape}"
            )
        self._check_biases(tree_biases)

    def _route_block(
        self,
        x: np.ndarray,
        row_start: int,
        tree_parameters: np.ndarray,
        tree_biases: np.ndarray,
    ) -> Array:
        config = self.config
        row_indices = jnp.arange(row_start, row_start + x.shape[0], dtype=jnp.int32)
        return k_feature_routing(
            jnp.asarray(x),
            row_indices,
            jnp.asarray(tree_parameters),
            jnp.asarray(tree_biases),
            layer_num=config.layer_num,
            max_nodes=config.max_nodes,
            num_features_per_node=config.num_features_per_node,
            random_seed=config.random_seed,
            feature_selector=self.feature_selector,
            split_probability=self.split_probability,
        )

"""Dense routing function.

Same flat soft tree as the k-feature routing function, but every decision
sees every input feature: node j goes left with probability
sigmoid(w_j . x - b_j). No feature selection is involved, so layer_num,
random_seed and num_features_per_node in the config are unused.
"""

from __future__ import annotations

from functools import partial
from typing import NamedTuple

import jax
import jax.numpy as jnp
import numpy as np
from jax import Array

from jaxforest.routing.base import BaseRoutingFunction
from jaxforest.routing.soft import left_probability
from jaxforest.structures import propagate_routing


class DenseTreeParams(NamedTuple):
    """Parameters for a dense soft decision tree.

    Attributes:
        weights: Logistic weights, shape (num_internal, num_features).
        biases: Logistic biases, shape (num_internal,).
    """

    weights: Array  # (num_internal, num_features)
    biases: Array  # (num_internal,)


@partial(jax.jit, static_argnames=("max_nodes",))
def dense_routing(
    x: Array, tree_parameters: Array, tree_biases: Array, *, max_nodes: int
) -> Array:
    """Routing probabilities for a block of rows, shape (batch, max_nodes)."""
    left_probs = jax.vmap(
        lambda point: jax.vmap(lambda w, b: left_probability(point, w, b))(
            tree_parameters, tree_biases
        )
    )(x)
    return propagate_routing(left_probs, max_nodes)


class RoutingFunction(BaseRoutingFunction):
    """Routing function of a soft tree whose decisions use all features."""

    def init_params(
        self,
        key: Array,
        num_features: int,
        init_scale: float = 0.1,
    ) -> DenseTreeParams:
        """Initialize tree parameters.

        Weights are normalized per node, as for hyperplane splits.
        """
        num_internal = self.config.num_internal_nodes
        keys = jax.random.split(key, 2)
        weights = jax.random.normal(keys[0], (num_internal, num_features)) * init_scale
        weights = weights / (jnp.linalg.norm(weights, axis=-1, keepdims=True) + 1e-8)
        biases = jax.random.normal(keys[1], (num_internal,)) * init_scale
        return DenseTreeParams(weights=weights, biases=biases)

    def _check_params(
        self, tree_parameters: np.ndarray, tree_biases: np.ndarray, num_features: int
    ) -> None:
        num_internal = self.config.num_internal_nodes
        if (
            tree_parameters.ndim != 2
            or tree_parameters.shape[0] < num_internal
            or tree_parameters.shape[1] != num_features
        ):
            raise ValueError(
                f"tree_parameters should have shape ({num_internal}, {num_features}), "
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
        return dense_routing(
            jnp.asarray(x),
            jnp.asarray(tree_parameters),
            jnp.asarray(tree_biases),
            max_nodes=self.config.max_nodes,
        )

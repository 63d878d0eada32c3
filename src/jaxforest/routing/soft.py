"""Soft (sigmoid) routing functions.

Converts a node's weighted feature sum into the probability of taking the
left branch. jax.nn.sigmoid saturates cleanly to 0 and 1, so finite inputs
never produce NaN or Inf.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array


def soft_routing(score: Array, temperature: float = 1.0) -> Array:
    """Soft routing using sigmoid function.

    Args:
        score: Split scores, any shape.
        temperature: Sharpness parameter. Higher = sharper, lower = softer.

    Returns:
        Probability of going left, same shape as score, values in [0, 1].
    """
    return jax.nn.sigmoid(score * temperature)


def left_probability(point: Array, weights: Array, bias: Array) -> Array:
    """Left-branch probability of a node that sees every feature.

    Args:
        point: One input row, shape (num_features,).
        weights: Node weights, shape (num_features,).
        bias: Node bias, scalar.

    Returns:
        sigmoid(point @ weights - bias), scalar.
    """
    return soft_routing(jnp.dot(point, weights) - bias)


def left_probability_k(
    point: Array,
    feature_set: Array,
    weights: Array,
    bias: Array,
    num_features: int,
    num_features_per_node: int,
) -> Array:
    """Left-branch probability of a node restricted to a feature subset.

    The m-th weight applies to feature ``feature_set[m]``.

    Args:
        point: One input row, shape (num_features,).
        feature_set: Selected feature indices, shape (num_features_per_node,).
        weights: Node weights, shape (num_features_per_node,).
        bias: Node bias, scalar.
        num_features: Number of input features.
        num_features_per_node: Number of selected features.

    Returns:
        sigmoid(sum_m point[feature_set[m]] * weights[m] - bias), scalar.
    """
    del num_features  # indices are produced in range by the selector
    selected = jnp.take(point, feature_set[:num_features_per_node])
    return soft_routing(jnp.dot(selected, weights[:num_features_per_node]) - bias)

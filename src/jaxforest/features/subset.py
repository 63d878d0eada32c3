"""Deterministic feature subset selection.

Every decision in a k-feature tree looks at a small subset of the input
features. The subset is drawn from a counter-based PRNG seeded from the
tree's layer number, an index and a base seed, so it is reproducible across
runs and machines without storing it anywhere.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
from jax import Array

_SEED_MASK = 0xFFFFFFFF


def feature_seed(layer_num: int, index: Array | int, random_seed: int) -> Array:
    """Combine seed components into a 32-bit seed.

    seed = index ^ (layer_num << 16) ^ random_seed
    """
    base = ((layer_num << 16) ^ random_seed) & _SEED_MASK
    index = jnp.asarray(index).astype(jnp.uint32)
    return jnp.bitwise_xor(index, jnp.uint32(base))


def get_feature_set(
    layer_num: int,
    index: Array | int,
    random_seed: int,
    num_features: int,
    num_features_per_node: int,
) -> Array:
    """Pick the features a decision is allowed to use.

    Indices are drawn uniformly with replacement, so a subset may contain
    the same feature more than once.

    Args:
        layer_num: Layer number of the tree.
        index: Index the subset is keyed on. May be a traced value.
        random_seed: Base random seed.
        num_features: Number of input features.
        num_features_per_node: Size of the subset.

    Returns:
        Feature indices, shape (num_features_per_node,), dtype int32,
        values in [0, num_features).
    """
    if num_features < 1:
        raise ValueError(f"num_features must be at least 1, got {num_features}")
    key = jax.random.PRNGKey(feature_seed(layer_num, index, random_seed))
    return jax.random.randint(
        key, (num_features_per_node,), 0, num_features, dtype=jnp.int32
    )


def get_feature_sets(
    layer_num: int,
    indices: Array,
    random_seed: int,
    num_features: int,
    num_features_per_node: int,
) -> Array:
    """Vectorized :func:`get_feature_set` over a 1-d array of indices.

    Returns:
        Feature indices, shape (len(indices), num_features_per_node).
    """
    return jax.vmap(
        lambda i: get_feature_set(
            layer_num, i, random_seed, num_features, num_features_per_node
        )
    )(jnp.asarray(indices))

"""Flat complete binary tree.

A tree of capacity ``max_nodes`` is stored as a flat array: node j has its
left child at 2j+1 and its right child at 2j+2. Nodes [0, max_nodes // 2)
make decisions; the rest are leaves.

Routing probabilities are propagated one level at a time. The nodes of a
level occupy a contiguous index range and so do their children, laid out as
(left, right) pairs, so each level is a single broadcast multiply.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array


def num_internal_nodes(max_nodes: int) -> int:
    """Number of decision nodes in a tree of capacity max_nodes."""
    return max_nodes // 2


def tree_depth(max_nodes: int) -> int:
    """Number of decision levels from the root to the deepest leaf."""
    depth = 0
    level_start = 0
    while level_start < num_internal_nodes(max_nodes):
        level_start = 2 * level_start + 1
        depth += 1
    return depth


def children(node: int) -> tuple[int, int]:
    """Indices of a node's (left, right) children."""
    left = 2 * node + 1
    return left, left + 1


def leaf_indices(max_nodes: int) -> range:
    """Indices of the leaf slots."""
    return range(num_internal_nodes(max_nodes), max_nodes)


def propagate_routing(left_probs: Array, max_nodes: int) -> Array:
    """Compute the probability of reaching every node.

    Args:
        left_probs: Left-branch probability of each decision node,
            shape (batch, num_internal) with num_internal >= max_nodes // 2.
        max_nodes: Tree capacity, odd.

    Returns:
        Routing probabilities, shape (batch, max_nodes). Column 0 is 1 and
        each pair of children sums to its parent.
    """
    batch = left_probs.shape[0]
    num_internal = num_internal_nodes(max_nodes)

    probs = jnp.ones((batch, 1), dtype=left_probs.dtype)
    level_start = 0
    while level_start < num_internal:
        # The last level may be partial when max_nodes is not 2^d - 1.
        level_stop = min(2 * level_start + 1, num_internal)
        parents = probs[:, level_start:level_stop]
        p_left = left_probs[:, level_start:level_stop]
        pairs = jnp.stack([parents * p_left, parents * (1.0 - p_left)], axis=-1)
        probs = jnp.concatenate([probs, pairs.reshape(batch, -1)], axis=1)
        level_start = 2 * level_start + 1

    return probs


def leaf_probabilities(probabilities: Array, max_nodes: int) -> Array:
    """Slice the leaf slots out of a routing probability map.

    Every row sums to 1.

    Args:
        probabilities: Routing probabilities, shape (batch, max_nodes).
        max_nodes: Tree capacity.

    Returns:
        Leaf probabilities, shape (batch, max_nodes - max_nodes // 2).
    """
    return probabilities[:, num_internal_nodes(max_nodes):max_nodes]

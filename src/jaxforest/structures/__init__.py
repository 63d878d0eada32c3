"""Tree structures for jaxforest."""

from jaxforest.structures.flat_tree import (
    children,
    leaf_indices,
    leaf_probabilities,
    num_internal_nodes,
    propagate_routing,
    tree_depth,
)

__all__ = [
    "children",
    "leaf_indices",
    "leaf_probabilities",
    "num_internal_nodes",
    "propagate_routing",
    "tree_depth",
]

"""Configuration for routing functions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RoutingConfig:
    """Configuration for a single soft decision tree's routing function.

    Attributes:
        layer_num: Position of this tree in a layered ensemble. Only used to
            seed feature selection.
        max_nodes: Capacity of the flat complete binary tree, leaf slots
            included. Must be odd so that every child index 2j+1, 2j+2 of an
            internal node j < max_nodes // 2 lies inside the tree.
        num_features_per_node: Number of features each decision may use.
        random_seed: Base seed for feature selection.
        num_workers: Worker threads used to process row blocks.
        block_size: Rows per block handed to a worker. The last block is
            zero-padded to this size, so results are bit-identical for any
            batch size under the same block_size.
        verbose: Whether to log per-call progress at INFO level.
    """
    layer_num: int = 0
    max_nodes: int = 7
    num_features_per_node: int = 1
    random_seed: int = 0
    num_workers: int = 1
    block_size: int = 1024
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.layer_num < 0:
            raise ValueError(f"layer_num must be non-negative, got {self.layer_num}")
        if self.max_nodes < 1 or self.max_nodes % 2 == 0:
            raise ValueError(
                f"max_nodes must be a positive odd number (e.g. 2**depth - 1), "
                f"got {self.max_nodes}"
            )
        if self.num_features_per_node < 1:
            raise ValueError(
                f"num_features_per_node must be at least 1, "
                f"got {self.num_features_per_node}"
            )
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {self.num_workers}")
        if self.block_size < 1:
            raise ValueError(f"block_size must be at least 1, got {self.block_size}")

    @property
    def num_internal_nodes(self) -> int:
        """Number of nodes that make a decision (max_nodes // 2)."""
        return self.max_nodes // 2

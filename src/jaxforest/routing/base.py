"""Base class for routing functions.

A routing function maps a batch of inputs to the probability that each input
reaches each node of one soft decision tree. Subclasses only supply the
per-block computation; input checks, empty batches and row-parallel
dispatch live here.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import numpy as np
from jax import Array

from jaxforest.core.config import RoutingConfig
from jaxforest.core.executor import map_row_blocks

logger = logging.getLogger(__name__)


class BaseRoutingFunction(ABC):
    """Abstract base class for flat-tree routing functions."""

    def __init__(self, config: RoutingConfig | None = None) -> None:
        """Initialize routing function.

        Args:
            config: Tree and execution configuration. If None, uses defaults.
        """
        self.config = config or RoutingConfig()

    @abstractmethod
    def init_params(self, key: Array, num_features: int, **kwargs: Any) -> Any:
        """Initialize tree parameters."""

    @abstractmethod
    def _check_params(
        self, tree_parameters: np.ndarray, tree_biases: np.ndarray, num_features: int
    ) -> None:
        """Raise ValueError if the parameters do not fit the tree."""

    @abstractmethod
    def _route_block(
        self,
        x: np.ndarray,
        row_start: int,
        tree_parameters: np.ndarray,
        tree_biases: np.ndarray,
    ) -> Array:
        """Routing probabilities for rows [row_start, row_start + len(x))."""

    def route(
        self,
        input_data: np.ndarray | Array,
        tree_parameters: np.ndarray | Array,
        tree_biases: np.ndarray | Array,
    ) -> np.ndarray:
        """Compute the probability that each input reaches each node.

        Args:
            input_data: Features, shape (num_data, num_features).
            tree_parameters: Per-node logistic weights, one row per decision
                node.
            tree_biases: Per-node logistic biases, shape (num_internal,).

        Returns:
            Routing probabilities, shape (num_data, max_nodes), float32.
            ``out[i, j]`` is the probability that input i reaches node j.
        """
        config = self.config
        input_data = np.asarray(input_data, dtype=np.float32)
        if input_data.ndim == 0:
            raise ValueError("input_data should be two-dimensional, got a scalar")

        num_data = input_data.shape[0]
        if num_data > 0 and input_data.ndim != 2:
            raise ValueError(
                f"input_data should be two-dimensional, got shape {input_data.shape}"
            )
        if num_data == 0:
            return np.zeros((0, config.max_nodes), dtype=np.float32)

        num_features = input_data.shape[1]
        num_internal = config.num_internal_nodes
        tree_parameters = np.asarray(tree_parameters, dtype=np.float32)
        tree_biases = np.asarray(tree_biases, dtype=np.float32)
        self._check_params(tree_parameters, tree_biases, num_features)

        out = np.empty((num_data, config.max_nodes), dtype=np.float32)
        if num_internal == 0:
            out[:, 0] = 1.0
            return out

        params = tree_parameters[:num_internal]
        biases = tree_biases[:num_internal]

        def run_block(start: int, stop: int) -> None:
            # Every block is padded to block_size rows, so all blocks run the
            # same compiled kernel and row i always lands at position
            # i % block_size. Its result then depends only on its own row.
            x = input_data[start:stop]
            pad = config.block_size - x.shape[0]
            if pad:
                x = np.pad(x, ((0, pad), (0, 0)))
            block = self._route_block(x, start, params, biases)
            out[start:stop] = np.asarray(block)[: stop - start]

        tic = time.perf_counter()
        num_blocks = map_row_blocks(
            run_block, num_data, config.block_size, config.num_workers
        )
        if config.verbose:
            logger.info(
                f"Routed {num_data} rows through {config.max_nodes} nodes "
                f"({num_blocks} blocks, {time.perf_counter() - tic:.3f}s)"
            )
        return out

    def __call__(
        self,
        input_data: np.ndarray | Array,
        tree_parameters: np.ndarray | Array,
        tree_biases: np.ndarray | Array,
    ) -> np.ndarray:
        return self.route(input_data, tree_parameters, tree_biases)

    def _check_biases(self, tree_biases: np.ndarray) -> None:
        num_internal = self.config.num_internal_nodes
        if tree_biases.ndim != 1 or tree_biases.shape[0] < num_internal:
            raise ValueError(
                f"tree_biases should have shape ({num_internal},), "
                f"got {tree_biases.shape}"
            )

"""Core abstractions, configuration and execution for jaxforest."""

from jaxforest.core.config import RoutingConfig
from jaxforest.core.executor import map_row_blocks, row_blocks
from jaxforest.core.protocols import FeatureSelector, SplitProbabilityFn

__all__ = [
    "FeatureSelector",
    "SplitProbabilityFn",
    "RoutingConfig",
    "map_row_blocks",
    "row_blocks",
]

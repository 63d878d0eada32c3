"""
jaxforest: Routing functions for soft decision forests with JAX.

A soft decision tree makes every decision with a logistic function, so an
input reaches every node with some probability. jaxforest computes that
full per-node probability map for a batch of inputs, with the tree stored
as a flat array (node j has children 2j+1 and 2j+2).

Features:
- K-feature routing: each decision uses a small, deterministically drawn
  subset of the input features
- Dense routing: each decision uses every feature
- Row-parallel execution over a bounded thread pool
- jit-compiled, vmapped kernels

Quick Start:
    >>> import jax
    >>> from jaxforest import KFeatureRoutingFunction, RoutingConfig
    >>> config = RoutingConfig(max_nodes=15, num_features_per_node=3)
    >>> routing = KFeatureRoutingFunction(config)
    >>> params = routing.init_params(jax.random.PRNGKey(0))
    >>> probs = routing(X, params.weights, params.biases)  # (n, 15)
"""

from jaxforest._version import __version__

# Routing functions
from jaxforest.routing import (
    DenseTreeParams,
    KFeatureRoutingFunction,
    KFeatureTreeParams,
    RoutingFunction,
    left_probability,
    left_probability_k,
    soft_routing,
)

# Low-level components
from jaxforest.core import FeatureSelector, RoutingConfig, SplitProbabilityFn
from jaxforest.features import get_feature_set, get_feature_sets
from jaxforest.structures import leaf_probabilities, propagate_routing

__all__ = [
    "__version__",
    # Routing functions
    "KFeatureRoutingFunction",
    "KFeatureTreeParams",
    "RoutingFunction",
    "DenseTreeParams",
    # Configuration and protocols
    "RoutingConfig",
    "FeatureSelector",
    "SplitProbabilityFn",
    # Primitives
    "get_feature_set",
    "get_feature_sets",
    "left_probability",
    "left_probability_k",
    "soft_routing",
    # Structures
    "propagate_routing",
    "leaf_probabilities",
]

"""Routing functions for jaxforest."""

from jaxforest.routing.base import BaseRoutingFunction
from jaxforest.routing.dense import DenseTreeParams, RoutingFunction, dense_routing
from jaxforest.routing.k_feature import (
    KFeatureRoutingFunction,
    KFeatureTreeParams,
    k_feature_routing,
)
from jaxforest.routing.soft import left_probability, left_probability_k, soft_routing

__all__ = [
    "BaseRoutingFunction",
    "DenseTreeParams",
    "RoutingFunction",
    "dense_routing",
    "KFeatureRoutingFunction",
    "KFeatureTreeParams",
    "k_feature_routing",
    "left_probability",
    "left_probability_k",
    "soft_routing",
]

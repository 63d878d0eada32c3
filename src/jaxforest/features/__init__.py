"""Feature subset selection for jaxforest."""

from jaxforest.features.subset import feature_seed, get_feature_set, get_feature_sets

__all__ = [
    "feature_seed",
    "get_feature_set",
    "get_feature_sets",
]

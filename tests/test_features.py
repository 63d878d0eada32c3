"""Tests for feature subset selection and split probabilities."""

import jax
import jax.numpy as jnp
import numpy as np
import pytest

from jaxforest import (
    get_feature_set,
    get_feature_sets,
    left_probability,
    left_probability_k,
    soft_routing,
)
from jaxforest.features import feature_seed


class TestFeatureSubset:
    def test_shape_and_range(self):
        """Test subset shape, dtype and index range."""
        for index in range(20):
            features = get_feature_set(1, index, 42, num_features=5, num_features_per_node=3)

            assert features.shape == (3,)
            assert features.dtype == jnp.int32
            assert jnp.all((features >= 0) & (features < 5))

    def test_deterministic(self):
        """Test identical inputs give identical output."""
        first = get_feature_set(3, 7, 123, 10, 4)
        second = get_feature_set(3, 7, 123, 10, 4)

        np.testing.assert_array_equal(np.asarray(first), np.asarray(second))

    def test_seed_combines_components(self):
        """Test seed is index ^ (layer_num << 16) ^ random_seed."""
        assert int(feature_seed(0, 5, 0)) == 5
        assert int(feature_seed(1, 0, 0)) == 1 << 16
        assert int(feature_seed(2, 3, 7)) == 3 ^ (2 << 16) ^ 7

        np.testing.assert_array_equal(
            np.asarray(get_feature_set(1, 0, 0, 50, 6)),
            np.asarray(get_feature_set(0, 1 << 16, 0, 50, 6)),
        )

    def test_different_indices_differ(self):
        """Test different indices give different subsets."""
        subsets = {tuple(np.asarray(get_feature_set(0, i, 0, 1000, 5))) for i in range(10)}

        assert len(subsets) > 1

    def test_vectorized_matches_scalar(self):
        """Test batched selection matches per-index selection."""
        batched = get_feature_sets(2, jnp.arange(8), 99, 12, 3)

        assert batched.shape == (8, 3)
        for i in range(8):
            np.testing.assert_array_equal(
                np.asarray(batched[i]), np.asarray(get_feature_set(2, i, 99, 12, 3))
            )

    def test_traceable_under_jit(self):
        """Test selection works with a traced index."""
        select = jax.jit(lambda i: get_feature_set(0, i, 3, 10, 4))

        np.testing.assert_array_equal(
            np.asarray(select(5)), np.asarray(get_feature_set(0, 5, 3, 10, 4))
        )

    def test_rejects_no_features(self):
        """Test selection from zero features is rejected."""
        with pytest.raises(ValueError, match="num_features"):
            get_feature_set(0, 0, 0, 0, 2)


class TestSplitProbability:
    def test_soft_routing_range(self):
        """Test sigmoid routing stays finite and in [0, 1]."""
        scores = jnp.array([-1e4, -3.0, 0.0, 3.0, 1e4])

        probs = soft_routing(scores)

        assert jnp.all(jnp.isfinite(probs))
        assert jnp.all((probs >= 0.0) & (probs <= 1.0))
        assert probs[2] == 0.5

    def test_left_probability_k(self):
        """Test k-feature split uses the selected features."""
        point = jnp.array([1.0, 2.0, 3.0])
        feature_set = jnp.array([2, 0], dtype=jnp.int32)
        weights = jnp.array([0.5, -1.0])

        prob = left_probability_k(point, feature_set, weights, 0.25, 3, 2)

        # 3.0 * 0.5 + 1.0 * -1.0 - 0.25
        assert jnp.isclose(prob, jax.nn.sigmoid(0.25))

    def test_left_probability_k_repeated_feature(self):
        """Test a repeated feature counts once per draw."""
        point = jnp.array([2.0, 0.0])
        feature_set = jnp.array([0, 0], dtype=jnp.int32)
        weights = jnp.array([1.0, 1.0])

        prob = left_probability_k(point, feature_set, weights, 0.0, 2, 2)

        assert jnp.isclose(prob, jax.nn.sigmoid(4.0))

    def test_left_probability_stable(self):
        """Test extreme scores saturate without NaN."""
        point = jnp.array([1e6, -1e6])
        weights = jnp.array([1.0, 1.0])

        assert left_probability(point, weights, -1e6) == 1.0
        assert left_probability(point, weights, 1e6) == 0.0
        assert jnp.isclose(left_probability(point, weights, 0.0), 0.5)

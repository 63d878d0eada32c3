"""Tests for routing configuration and row-block execution."""

import threading

import pytest

from jaxforest.core import RoutingConfig, map_row_blocks, row_blocks


class TestRoutingConfig:
    def test_defaults(self):
        """Test default configuration values."""
        config = RoutingConfig()

        assert config.max_nodes == 7
        assert config.num_internal_nodes == 3

    @pytest.mark.parametrize("max_nodes", [0, -3, 2, 8])
    def test_rejects_bad_capacity(self, max_nodes):
        """Test even or non-positive capacities are rejected."""
        with pytest.raises(ValueError, match="max_nodes"):
            RoutingConfig(max_nodes=max_nodes)

    def test_rejects_bad_values(self):
        """Test out-of-range settings are rejected."""
        with pytest.raises(ValueError, match="num_features_per_node"):
            RoutingConfig(num_features_per_node=0)
        with pytest.raises(ValueError, match="num_workers"):
            RoutingConfig(num_workers=0)
        with pytest.raises(ValueError, match="block_size"):
            RoutingConfig(block_size=0)
        with pytest.raises(ValueError, match="layer_num"):
            RoutingConfig(layer_num=-1)

    def test_frozen(self):
        """Test configuration cannot be mutated."""
        config = RoutingConfig()

        with pytest.raises(AttributeError):
            config.max_nodes = 15


class TestRowBlocks:
    def test_blocks_cover_rows(self):
        """Test row blocks cover the batch in order."""
        assert list(row_blocks(10, 4)) == [(0, 4), (4, 8), (8, 10)]
        assert list(row_blocks(0, 4)) == []

    @pytest.mark.parametrize("num_workers", [1, 3])
    def test_map_visits_every_row_once(self, num_workers):
        """Test every row is processed exactly once."""
        seen = []
        lock = threading.Lock()

        def visit(start, stop):
            with lock:
                seen.extend(range(start, stop))

        num_blocks = map_row_blocks(visit, 25, 4, num_workers)

        assert num_blocks == 7
        assert sorted(seen) == list(range(25))

    def test_worker_error_propagates(self):
        """Test a failing block raises in the caller."""
        def fail(start, stop):
            if start == 4:
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            map_row_blocks(fail, 12, 4, num_workers=2)

"""
Tests for the noise and smoothing agents.
"""

import pytest
import numpy as np

from py_islandgen.core.agents import NoiseAgent, SmoothingAgent
from py_islandgen.core.grid import Grid


class TestNoiseAgent:
    """Test random height perturbation."""

    def test_zero_chance_is_identity(self, island_grid, rng):
        before = island_grid.heights.copy()
        NoiseAgent(island_grid, 5, 0, 1.0, 2.0, rng=rng).run()
        assert np.array_equal(island_grid.heights, before)

    def test_full_chance_hits_all_land(self, island_grid, rng):
        before = island_grid.heights.copy()
        NoiseAgent(island_grid, 1, 100, 1.0, 1.0, rng=rng).run()

        land = before >= 1
        assert np.allclose(island_grid.heights[land], before[land] + 1.0)
        assert np.all(island_grid.heights[~land] == 0)

    def test_bumps_within_range(self, island_grid, rng):
        before = island_grid.heights.copy()
        NoiseAgent(island_grid, 1, 50, 20.0, 30.0, rng=rng).run()

        delta = island_grid.heights - before
        hit = delta != 0
        assert hit.any()
        assert np.all(delta[hit] >= 20.0 - 1e-4)
        assert np.all(delta[hit] <= 30.0 + 1e-4)

    def test_invalid_arguments(self, island_grid):
        with pytest.raises(ValueError):
            NoiseAgent(island_grid, 1, 120, 0.0, 1.0)
        with pytest.raises(ValueError):
            NoiseAgent(island_grid, 1, 10, 2.0, 1.0)


class TestSmoothingAgent:
    """Test the cardinal-neighbour smoothing pass."""

    def test_zero_tokens_is_identity(self, island_grid, rng):
        before = island_grid.heights.copy()
        SmoothingAgent(island_grid, 0, rng=rng).run()
        assert np.array_equal(island_grid.heights, before)

    def test_single_pass_on_spike(self):
        heights = np.ones((5, 5))
        heights[2, 2] = 5.0
        grid = Grid(5, 5, heights)

        SmoothingAgent(grid, 1).smooth_once()

        # visited before the spike, so they still see its old height
        assert grid.heights[2, 1] == pytest.approx(2.0)
        assert grid.heights[1, 2] == pytest.approx(2.0)
        # the spike averages two already smoothed neighbours and two plain ones
        assert grid.heights[2, 2] == pytest.approx(1.5)
        assert grid.heights[1, 3] == pytest.approx(1.25)
        assert grid.heights[2, 3] == pytest.approx(1.1875)
        # edge cells average in-bounds neighbours only
        assert grid.heights[0, 0] == pytest.approx(1.0)

    def test_updated_neighbor_feeds_next_cell(self):
        """A corner peak is flattened before its neighbours read it."""
        heights = np.full((3, 3), 2.0)
        heights[0, 0] = 10.0
        grid = Grid(3, 3, heights)

        SmoothingAgent(grid, 1).smooth_once()

        assert np.allclose(grid.heights, 2.0)

    def test_ocean_is_not_smoothed(self, island_grid):
        ocean = island_grid.heights == 0
        SmoothingAgent(island_grid, 3).run()
        assert np.all(island_grid.heights[ocean] == 0)

    def test_matches_cell_by_cell_pass(self):
        rng = np.random.default_rng(0)
        heights = rng.random((12, 9)) * 10 + 1
        heights[rng.random((12, 9)) < 0.2] = 0
        grid = Grid(12, 9, heights)

        expected = heights.astype(np.float32).astype(np.float64)
        for _ in range(2):
            for x in range(12):
                for z in range(9):
                    if expected[x, z] < 1:
                        continue
                    neighbors = [
                        expected[nx, nz]
                        for nx, nz in ((x - 1, z), (x + 1, z), (x, z - 1), (x, z + 1))
                        if 0 <= nx < 12 and 0 <= nz < 9
                    ]
                    expected[x, z] = sum(neighbors) / len(neighbors)

        SmoothingAgent(grid, 2).run()

        assert np.allclose(grid.heights, expected, atol=1e-4)

"""
Tests for the terrain grid.
"""

import pytest
import numpy as np

from py_islandgen.core.grid import Direction, Grid, Sample


class TestGrid:
    """Test grid storage and access."""

    def test_new_grid_is_ocean(self):
        grid = Grid(8, 5)

        assert grid.shape == (8, 5)
        assert grid.heights.shape == (8, 5)
        assert grid.heights.dtype == np.float32
        assert np.all(grid.heights == 0)
        assert not np.any(grid.color_set)

    def test_invalid_dimensions(self):
        with pytest.raises(ValueError):
            Grid(0, 4)
        with pytest.raises(ValueError):
            Grid(4, 4, np.zeros((3, 4)))

    def test_get_and_set(self):
        grid = Grid(4, 4)
        grid.set(1, 2, Sample(1, 2, 5.5, (10, 20, 30)))

        sample = grid.get(1, 2)
        assert sample.height == pytest.approx(5.5)
        assert sample.color == (10, 20, 30)
        assert sample.position == (1.0, 5.5, 2.0)

        grid.set(1, 2, Sample(1, 2, 1.0))
        assert grid.get(1, 2).color is None

    def test_out_of_bounds_raises(self):
        grid = Grid(4, 4)

        with pytest.raises(IndexError):
            grid.get(4, 0)
        with pytest.raises(IndexError):
            grid.set_height(-1, 0, 1.0)
        with pytest.raises(IndexError):
            grid.set_color(0, 9, (1, 2, 3))

    def test_neighbors_have_no_wraparound(self):
        grid = Grid(3, 3)

        corner = grid.neighbors4(0, 0)
        assert set(corner) == {Direction.NORTH, Direction.EAST}
        assert corner[Direction.EAST].x == 1

        center = grid.neighbors4(1, 1)
        assert len(center) == 4

    def test_land_mask(self):
        grid = Grid(3, 3)
        grid.set_height(1, 1, 2.0)
        grid.set_height(0, 0, 0.5)

        assert grid.land_mask().sum() == 1
        assert grid.land_mask(0.1).sum() == 2
        assert grid.is_land(0, 0)
        assert not grid.is_land(2, 2)

    def test_copy_is_independent(self):
        grid = Grid(3, 3)
        grid.set_color(0, 0, (1, 1, 1))
        other = grid.copy()

        assert other == grid
        other.set_height(2, 2, 4.0)
        assert other != grid
        assert grid.height(2, 2) == 0

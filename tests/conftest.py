"""Shared pytest fixtures for all test modules."""
import pytest
import numpy as np

from py_islandgen.config import TerrainSettings
from py_islandgen.core.grid import Grid
from py_islandgen.core.spatial import PointSet, coastal_mask, mask_to_points
from py_islandgen.utils.random import make_rng


# === Randomness ===

@pytest.fixture
def rng():
    """Seeded generator so every test run draws the same numbers."""
    return make_rng(1234)


# === Grid Fixtures ===

@pytest.fixture
def island_grid():
    """128x128 grid with a round plateau of height 3 in the middle."""
    size = 128
    xs, zs = np.ogrid[0:size, 0:size]
    d = np.hypot(xs - size // 2, zs - size // 2)
    heights = np.where(d < 45, 3.0, 0.0)
    return Grid(size, size, heights)


@pytest.fixture
def island_coastline(island_grid):
    """Coastal points of the plateau."""
    return PointSet(mask_to_points(coastal_mask(island_grid.heights, 2)))


@pytest.fixture
def cone_grid():
    """101x101 grid sloping down from (50, 50) to the ocean."""
    xs, zs = np.ogrid[0:101, 0:101]
    d = np.hypot(xs - 50, zs - 50)
    return Grid(101, 101, np.maximum(60.0 - d, 0.0))


# === Settings Fixtures ===

@pytest.fixture
def small_settings():
    """Settings scaled down for grids around 100 samples wide."""
    return TerrainSettings(
        border_size=6,
        number_of_beaches=2,
        beach_tokens=20,
        min_amount_of_mountains=2,
        max_amount_of_mountains=3,
        mountain_min_length=30,
        mountain_max_length=60,
        mountain_width=12,
        min_amount_of_hills=2,
        max_amount_of_hills=3,
        hill_min_length=10,
        hill_max_length=20,
        hill_width=8,
        relief_smoothing_passes=1,
        slope_smoothing_passes=2,
        beach_smoothing_passes=1,
        number_of_volcanoes=1,
        caldera_width=3,
        volcano_width=12,
        number_of_lava_rivers=1,
    )

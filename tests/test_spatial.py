"""
Tests for spatial helpers.
"""

import pytest
import numpy as np

from py_islandgen.core.spatial import (
    CoastIndex,
    PointSet,
    WindowIndex,
    blend_field,
    border_mask,
    coastal_mask,
    inverse_distance_blend,
    nearest_in_set,
)
from py_islandgen.utils.random import make_rng


class TestPointSet:
    """Test the insertion-ordered point set."""

    def test_add_discard_contains(self):
        points = PointSet([(1, 1), (2, 2), (1, 1)])

        assert len(points) == 2
        assert (2, 2) in points
        points.discard((1, 1))
        points.discard((9, 9))
        assert list(points) == [(2, 2)]

    def test_swap_remove_keeps_index_consistent(self):
        points = PointSet([(0, 0), (1, 1), (2, 2), (3, 3)])
        points.discard((1, 1))

        assert points[1] == (3, 3)
        points.discard((3, 3))
        assert list(points) == [(0, 0), (2, 2)]

    def test_choice(self):
        rng = make_rng(1)
        assert PointSet().choice(rng) is None
        points = PointSet([(4, 5)])
        assert points.choice(rng) == (4, 5)

    def test_iteration_allows_mutation(self):
        points = PointSet([(0, 0), (1, 0)])
        for p in points:
            points.discard(p)
        assert len(points) == 0


class TestWindowIndex:
    """Test square-window queries."""

    def test_window_is_exclusive_square(self):
        index = WindowIndex(4, [(10, 10), (12, 10), (13, 10), (10, 7), (30, 30)])

        found = set(index.window((10, 10), 3))
        assert found == {(10, 10), (12, 10)}

        index.discard((12, 10))
        assert set(index.window((10, 10), 3)) == {(10, 10)}


class TestNearest:
    """Test nearest point searches."""

    def test_nearest_in_set(self):
        assert nearest_in_set((0, 0), []) is None
        assert nearest_in_set((0, 0), [(5, 5), (1, 2), (-3, 0)]) == (1, 2)

    def test_coast_index(self):
        index = CoastIndex(PointSet([(0, 0), (10, 0)]))

        point, dist = index.nearest((8, 0))
        assert point == (10, 0)
        assert dist == pytest.approx(2.0)

        empty = CoastIndex([])
        assert empty.nearest((1, 1)) is None
        assert empty.distance((1, 1)) == float("inf")


class TestBlend:
    """Test inverse-distance blending."""

    def test_peak_on_point(self):
        assert inverse_distance_blend((3, 3), [(3, 3)], [40.0], 10) == pytest.approx(40.0)

    def test_hard_cutoff(self):
        assert inverse_distance_blend((0, 0), [(10, 0)], [40.0], 10) == 0.0
        assert inverse_distance_blend((0, 0), [], [], 10) == 0.0

    def test_linear_falloff(self):
        # single peak: weight normalizes to 1, height falls off linearly
        assert inverse_distance_blend((5, 0), [(0, 0)], [40.0], 10) == pytest.approx(20.0)

    def test_field_matches_point_blend(self):
        peaks = [(5, 5), (12, 8), (0, 19)]
        heights = [30.0, 50.0, 10.0]
        blended, weight = blend_field((20, 20), peaks, heights, 9)

        assert blended.shape == (20, 20)
        for point in [(5, 5), (8, 7), (0, 15), (19, 0), (10, 10)]:
            expected = inverse_distance_blend(point, peaks, heights, 9)
            assert blended[point] == pytest.approx(expected)
        assert weight[19, 19] == 0
        assert blended[19, 19] == 0

    def test_field_stays_in_bounds_for_edge_peaks(self):
        blended, _ = blend_field((6, 6), [(0, 0), (5, 5)], [10.0, 10.0], 20)
        assert blended.shape == (6, 6)
        assert np.all(blended > 0)


class TestCoastalMask:
    """Test the vectorized coast test."""

    def test_plateau_outline(self):
        heights = np.zeros((9, 9), dtype=np.float32)
        heights[3:6, 3:6] = 3
        mask = coastal_mask(heights, 1)

        assert mask.sum() == 8
        assert not mask[4, 4]
        assert mask[3, 3]

    def test_low_land_is_not_coast(self):
        heights = np.zeros((5, 5), dtype=np.float32)
        heights[2, 2] = 0.5
        assert not coastal_mask(heights, 0).any()

    def test_ocean_in_border_is_ignored(self):
        heights = np.full((5, 5), 2.0, dtype=np.float32)
        heights[0, :] = 0
        assert not coastal_mask(heights, 1).any()
        assert coastal_mask(heights, 0)[1, 2]

    def test_border_mask(self):
        mask = border_mask((6, 6), 2)
        assert mask.sum() == 4
        assert not border_mask((4, 4), 2).any()

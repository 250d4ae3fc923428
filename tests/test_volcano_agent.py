"""
Tests for the volcano agent.
"""

import pytest
import numpy as np

from py_islandgen.core.agents import VolcanoAgent
from py_islandgen.core.grid import Grid


def flat_land(size=64, height=10.0):
    return Grid(size, size, np.full((size, size), height))


def make_agent(grid, tops, rng, tokens=1, **overrides):
    params = dict(
        caldera_width=5,
        caldera_width_range=2.0,
        volcano_height=70,
        volcano_height_range=10.0,
        volcano_width=20,
    )
    params.update(overrides)
    return VolcanoAgent(grid, tokens, tops, rng=rng, **params)


class TestVolcanoAgent:
    """Test volcano placement."""

    def test_requires_mountain_tops(self, rng):
        with pytest.raises(ValueError):
            make_agent(flat_land(), None, rng)

    def test_builds_cone_and_caldera(self, rng):
        grid = flat_land()
        tops = [(32, 32)]

        result = make_agent(grid, tops, rng).run()

        assert tops == []
        assert len(result.volcanoes) == 1
        volcano = result.volcanoes[0]
        assert volcano.center == (32, 32)
        assert 4.0 <= volcano.caldera_radius <= 6.0
        assert 65.0 <= volcano.height <= 75.0

        heights = grid.heights
        assert heights[32, 32] == pytest.approx(VolcanoAgent.CALDERA_FLOOR)
        assert heights[34, 32] == pytest.approx(VolcanoAgent.CALDERA_FLOOR)
        # slope just outside the caldera is far above the surrounding land
        assert heights[32 + 7, 32] > 20.0
        # beyond the cone nothing changes
        assert heights[32, 32 + 25] == pytest.approx(10.0)

    def test_ocean_inside_cone_is_untouched(self, rng):
        grid = flat_land()
        grid.heights[40, 32] = 0

        make_agent(grid, [(32, 32)], rng).run()

        assert grid.heights[40, 32] == 0

    def test_stops_when_tops_run_out(self, rng):
        grid = flat_land()
        tops = [(20, 20), (44, 44)]

        result = make_agent(grid, tops, rng, tokens=5).run()

        assert len(result.volcanoes) == 2
        assert tops == []
        assert {v.center for v in result.volcanoes} == {(20, 20), (44, 44)}

    def test_zero_tokens(self, rng):
        grid = flat_land()
        before = grid.heights.copy()
        tops = [(32, 32)]

        result = make_agent(grid, tops, rng, tokens=0).run()

        assert result.volcanoes == []
        assert tops == [(32, 32)]
        assert np.array_equal(grid.heights, before)

    def test_volcano_at_edge_stays_in_bounds(self, rng):
        grid = flat_land(32)
        result = make_agent(grid, [(0, 31)], rng).run()

        assert grid.heights.shape == (32, 32)
        assert result.volcanoes[0].center == (0, 31)

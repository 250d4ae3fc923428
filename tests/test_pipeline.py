"""
End-to-end tests for the terrain pipeline.
"""

import pytest
import numpy as np

from py_islandgen.config import TerrainSettings
from py_islandgen.core.pipeline import STAGES, GenerationCancelled, generate_terrain


class TestGenerateTerrain:
    """Test the full agent pipeline on small grids."""

    def test_produces_an_island(self, small_settings):
        result = generate_terrain(small_settings, 96, 96, seed=7)

        heights = result.grid.heights
        assert result.grid.shape == (96, 96)
        assert np.isfinite(heights).all()
        assert (heights > 0).any()
        assert (heights == 0).any()
        assert len(result.coastline) > 0
        assert len(result.lava_paths) <= len(result.volcanoes)
        assert len(result.volcanoes) <= small_settings.number_of_volcanoes
        assert result.seed == 7

    def test_same_seed_same_terrain(self, small_settings):
        a = generate_terrain(small_settings, 96, 96, seed="determinism")
        b = generate_terrain(small_settings, 96, 96, seed="determinism")

        assert a.grid == b.grid
        assert list(a.coastline) == list(b.coastline)
        assert a.mountain_vertices == b.mountain_vertices
        assert a.mountain_tops == b.mountain_tops
        assert a.hill_tops == b.hill_tops
        assert a.volcanoes == b.volcanoes
        assert a.lava_paths == b.lava_paths

    def test_different_seed_different_terrain(self, small_settings):
        a = generate_terrain(small_settings, 96, 96, seed=1)
        b = generate_terrain(small_settings, 96, 96, seed=2)

        assert a.grid != b.grid

    def test_progress_reports_every_stage(self, small_settings):
        calls = []

        generate_terrain(
            small_settings, 64, 64, seed=3,
            progress=lambda stage, index, total: calls.append((stage, index, total)),
        )

        assert [c[0] for c in calls] == list(STAGES)
        assert [c[1] for c in calls] == list(range(len(STAGES)))
        assert all(c[2] == len(STAGES) for c in calls)

    def test_cancellation(self, small_settings):
        seen = []

        def progress(stage, index, total):
            seen.append(stage)
            if stage == "mountains":
                raise GenerationCancelled(stage)

        with pytest.raises(GenerationCancelled):
            generate_terrain(small_settings, 64, 64, seed=3, progress=progress)

        assert seen == ["coast", "relief_noise", "relief_smoothing", "mountains"]

    def test_island_disabled(self):
        calls = []
        result = generate_terrain(
            TerrainSettings(one_island=False), 32, 32, seed=1,
            progress=lambda *args: calls.append(args),
        )

        assert np.all(result.grid.heights == 0)
        assert len(result.coastline) == 0
        assert result.volcanoes == []
        assert calls == []

    def test_grid_size_limits(self):
        with pytest.raises(ValueError):
            generate_terrain(TerrainSettings(), 100000, 16)
        with pytest.raises(ValueError):
            generate_terrain(TerrainSettings(), 2, 16)

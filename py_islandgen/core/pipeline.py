"""
Terrain generation pipeline.

Owns the grid for one generation run and hands it to each agent in turn,
threading the derived lists (coastline, mountain tops, volcanoes) from the
agent that produces them to the agents that consume them.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import structlog

from ..config.config import settings as app_settings
from ..config.terrain import TerrainSettings
from ..utils.random import Seed, spawn_agent_rngs
from .agents import (
    BeachAgent,
    CoastAgent,
    HillAgent,
    LavaAgent,
    MountainAgent,
    NoiseAgent,
    SmoothingAgent,
    Volcano,
    VolcanoAgent,
)
from .grid import Grid, Point
from .spatial import PointSet

logger = structlog.get_logger()

STAGES = (
    "coast",
    "relief_noise",
    "relief_smoothing",
    "mountains",
    "hills",
    "slope_smoothing",
    "beaches",
    "beach_smoothing",
    "detail_noise",
    "volcanoes",
    "lava",
)

ProgressCallback = Callable[[str, int, int], None]


class GenerationCancelled(Exception):
    """Raised by a progress callback to stop a run at a stage boundary."""


@dataclass
class TerrainResult:
    """Final grid plus every derived list of a generation run."""

    grid: Grid
    seed: Optional[Seed] = None
    coastline: PointSet = field(default_factory=PointSet)
    mountain_vertices: List[Point] = field(default_factory=list)
    mountain_tops: List[Point] = field(default_factory=list)
    hill_tops: List[Point] = field(default_factory=list)
    volcanoes: List[Volcano] = field(default_factory=list)
    lava_paths: List[List[Point]] = field(default_factory=list)
    generation_time_seconds: float = 0.0


def generate_terrain(
    terrain_settings: Optional[TerrainSettings] = None,
    width: Optional[int] = None,
    depth: Optional[int] = None,
    seed: Optional[Seed] = None,
    progress: Optional[ProgressCallback] = None,
) -> TerrainResult:
    """
    Run the complete agent pipeline on a fresh ocean grid.

    Args:
        terrain_settings: Agent parameters (defaults when omitted)
        width: Samples along x (application default when omitted)
        depth: Samples along z (application default when omitted)
        seed: Run seed; the same seed, settings and size give identical output
        progress: Called as ``progress(stage, index, total)`` before each
            stage; may raise GenerationCancelled

    Returns:
        TerrainResult with the final grid and derived lists
    """
    terrain_settings = terrain_settings or TerrainSettings()
    width = width or app_settings.default_width
    depth = depth or app_settings.default_depth
    app_settings.check_grid_size(width, depth)
    if seed is None:
        seed = app_settings.default_seed

    start_time = time.time()
    grid = Grid(width, depth)
    result = TerrainResult(grid=grid, seed=seed)

    if not terrain_settings.one_island:
        logger.info("Island generation disabled, returning open ocean", width=width, depth=depth)
        return result

    logger.info("Starting terrain generation", width=width, depth=depth, seed=seed)
    rngs = spawn_agent_rngs(seed, STAGES)
    s = terrain_settings
    total = len(STAGES)

    def stage(index: int) -> str:
        name = STAGES[index]
        if progress is not None:
            progress(name, index, total)
        return name

    # Island outline
    coast = CoastAgent(
        grid, int(width * depth * s.land_fraction), s.border_size, rng=rngs[stage(0)]
    ).run()
    coastline = coast.coastline

    # A small layer of smoothed noise so the land is not flat
    NoiseAgent(
        grid, 1, s.relief_noise_chance, s.relief_noise_min_height,
        s.relief_noise_max_height, rng=rngs[stage(1)],
    ).run()
    SmoothingAgent(grid, s.relief_smoothing_passes, rng=rngs[stage(2)]).run()

    # Mountains and hills
    mountains = MountainAgent(
        grid, coastline,
        s.min_amount_of_mountains, s.max_amount_of_mountains,
        s.mountain_min_length, s.mountain_max_length,
        s.mountain_max_height, s.mountain_width,
        rng=rngs[stage(3)],
    ).run()
    hills = HillAgent(
        grid, coastline, mountains.mountain_vertices, mountains.mountain_tops,
        s.min_amount_of_hills, s.max_amount_of_hills,
        s.hill_min_length, s.hill_max_length,
        s.hill_max_height, s.hill_width,
        rng=rngs[stage(4)],
    ).run()
    SmoothingAgent(grid, s.slope_smoothing_passes, rng=rngs[stage(5)]).run()

    # Beaches, then soften the transition to the higher inland terrain
    beaches = BeachAgent(
        grid, s.beach_tokens, coastline, s.number_of_beaches, s.inland_distance,
        s.beach_sea_level, s.beach_max_height, rng=rngs[stage(6)],
    ).run()
    SmoothingAgent(grid, s.beach_smoothing_passes, rng=rngs[stage(7)]).run()
    NoiseAgent(
        grid, 1, s.noise_chance, s.noise_min_height, s.noise_max_height,
        rng=rngs[stage(8)],
    ).run()

    # Volcanoes on the remaining mountain tops, and lava flowing from them
    volcanoes = VolcanoAgent(
        grid, s.number_of_volcanoes, hills.mountain_tops,
        s.caldera_width, s.caldera_width_range,
        s.volcano_height, s.volcano_height_range, s.volcano_width,
        rng=rngs[stage(9)],
    ).run()
    lava = LavaAgent(
        grid, s.number_of_lava_rivers, list(volcanoes.volcanoes), rng=rngs[stage(10)]
    ).run()

    result.coastline = beaches.coastline
    result.mountain_vertices = mountains.mountain_vertices
    result.mountain_tops = volcanoes.mountain_tops
    result.hill_tops = hills.hill_tops
    result.volcanoes = volcanoes.volcanoes
    result.lava_paths = lava.paths
    result.generation_time_seconds = time.time() - start_time

    logger.info(
        "Terrain generation completed",
        seconds=round(result.generation_time_seconds, 3),
        coastal_cells=len(result.coastline),
        mountain_tops=len(result.mountain_tops),
        volcanoes=len(result.volcanoes),
        lava_rivers=len(result.lava_paths),
    )
    return result

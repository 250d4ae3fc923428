"""
Command-line entry point: generate an island and print a summary.
"""

import argparse
from typing import List, Optional

import numpy as np
import structlog

from .config import settings
from .config.terrain import TerrainSettings
from .core.pipeline import TerrainResult, generate_terrain
from .utils.log_config import configure_logging

logger = structlog.get_logger()


def _parse_seed(value: str):
    """Integers stay integers so ``--seed 42`` and ``seed=42`` agree."""
    try:
        return int(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="py-islandgen", description="Generate a procedural island heightmap"
    )
    parser.add_argument("--width", type=int, default=settings.default_width,
                        help="Samples along x")
    parser.add_argument("--depth", type=int, default=settings.default_depth,
                        help="Samples along z")
    parser.add_argument("--seed", type=_parse_seed, default=settings.default_seed,
                        help="Run seed (integer or string)")
    parser.add_argument("--border-size", type=int, default=None,
                        help="Ocean margin kept free of land")
    parser.add_argument("--volcanoes", type=int, default=None,
                        help="Number of volcanoes")
    parser.add_argument("--save", default=None,
                        help="Write the heights to this .npy file")
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--log-format", choices=["json", "console"],
                        default=settings.log_format)
    return parser


def summarize(result: TerrainResult) -> str:
    heights = result.grid.heights
    land = heights > 0
    lines = [
        f"Grid:              {result.grid.width} x {result.grid.depth}",
        f"Seed:              {result.seed}",
        f"Land share:        {land.mean() * 100:.1f}%",
        f"Height range:      {float(heights.min()):.2f} .. {float(heights.max()):.2f}",
        f"Coastal cells:     {len(result.coastline)}",
        f"Mountain vertices: {len(result.mountain_vertices)}",
        f"Mountain tops:     {len(result.mountain_tops)}",
        f"Hill tops:         {len(result.hill_tops)}",
        f"Volcanoes:         {len(result.volcanoes)}",
        f"Lava rivers:       {len(result.lava_paths)}",
        f"Time:              {result.generation_time_seconds:.2f}s",
    ]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_format)

    overrides = {}
    if args.border_size is not None:
        overrides["border_size"] = args.border_size
    if args.volcanoes is not None:
        overrides["number_of_volcanoes"] = args.volcanoes
    terrain_settings = TerrainSettings(**overrides)

    result = generate_terrain(terrain_settings, args.width, args.depth, args.seed)
    print(summarize(result))

    if args.save:
        np.save(args.save, result.grid.heights)
        logger.info("Heights saved", path=args.save)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

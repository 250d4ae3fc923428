"""Smoothing agent: low-pass filter over the land."""

from typing import Optional

import numpy as np
import structlog

from .base import BaseAgent
from ..grid import Grid

logger = structlog.get_logger()

NEIGHBOR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


class SmoothingAgent(BaseAgent):
    """
    Replaces every land cell by the mean of its cardinal neighbours.

    Cells are updated in place in ``[x, z]`` order, so a cell already sees
    the new heights of the neighbours visited before it in the same pass.
    Edge cells average their in-bounds neighbours only.
    """

    name = "smoothing"

    def __init__(self, grid: Grid, tokens: int, rng: Optional[np.random.Generator] = None):
        super().__init__(grid, tokens, rng)

    def run(self) -> Grid:
        for _ in range(self.tokens):
            self.smooth_once()
        logger.info("Terrain smoothed", passes=self.tokens)
        return self.grid

    def smooth_once(self) -> None:
        """
        One in-place pass.

        Visiting cells in ``[x, z]`` order means ``(x-1, z)`` and ``(x, z-1)``
        are already updated when ``(x, z)`` is reached while ``(x+1, z)`` and
        ``(x, z+1)`` are not. Cells on one anti-diagonal ``x + z = k`` never
        neighbour each other, so each diagonal is updated at once from the
        finished diagonal ``k - 1`` and the untouched diagonal ``k + 1``.
        """
        heights = self.grid.heights
        width, depth = heights.shape

        for k in range(width + depth - 1):
            xs = np.arange(max(0, k - depth + 1), min(k, width - 1) + 1)
            zs = k - xs
            land = heights[xs, zs] >= 1
            if not land.any():
                continue
            xs, zs = xs[land], zs[land]

            total = np.zeros(len(xs), dtype=np.float64)
            count = np.zeros(len(xs), dtype=np.float64)
            for dx, dz in NEIGHBOR_OFFSETS:
                nx, nz = xs + dx, zs + dz
                inside = (nx >= 0) & (nx < width) & (nz >= 0) & (nz < depth)
                total[inside] += heights[nx[inside], nz[inside]]
                count[inside] += 1

            has_neighbors = count > 0
            heights[xs[has_neighbors], zs[has_neighbors]] = (
                total[has_neighbors] / count[has_neighbors]
            ).astype(np.float32)

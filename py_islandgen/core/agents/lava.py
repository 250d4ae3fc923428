"""Lava agent: traces lava rivers downhill from volcano rims."""

from dataclasses import dataclass, field
from typing import List, Optional, Set

import numpy as np
import structlog

from .base import BaseAgent, normalize
from .volcano import Volcano
from ..grid import Color, Grid, Point

logger = structlog.get_logger()

LAVA_COLOR: Color = (255, 153, 0)


@dataclass
class LavaResult:
    """Output of the lava agent."""

    grid: Grid
    paths: List[List[Point]] = field(default_factory=list)
    volcanoes: List[Volcano] = field(default_factory=list)


class LavaAgent(BaseAgent):
    """Carves lava rivers, at most one per volcano."""

    name = "lava"

    RIM_OFFSET = 5  # lava leaves the cone this far outside the caldera
    MAX_STEPS = 1000
    MAX_CLIMB = 2.0  # largest uphill step allowed above sea level
    NOISE_RATIO = 1.0
    CORRIDOR = 3  # half-size of the recolored square around each path point

    def __init__(
        self,
        grid: Grid,
        tokens: int,
        volcanoes: List[Volcano],
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the lava agent.

        Args:
            grid: Grid to mutate
            tokens: Number of lava rivers
            volcanoes: Volcanoes produced by VolcanoAgent, each used once
            rng: Random generator
        """
        super().__init__(grid, tokens, rng)
        if volcanoes is None:
            raise ValueError("LavaAgent requires the volcanoes produced by VolcanoAgent")
        self.volcanoes = volcanoes
        self.paths: List[List[Point]] = []
        self._noised: Set[Point] = set()

    def run(self) -> LavaResult:
        """Generate up to ``tokens`` lava rivers."""
        for _ in range(self.tokens):
            if not self.volcanoes:
                break
            volcano = self.volcanoes.pop(int(self.rng.integers(len(self.volcanoes))))
            path = self.trace_path(volcano)
            if path is None:
                logger.debug("No rim cell found for lava", center=volcano.center)
                continue
            for point in path:
                self.noise_points(point)
            self.paths.append(path)

        logger.info(
            "Lava rivers generated",
            requested=self.tokens,
            rivers=len(self.paths),
            cells_colored=len(self._noised),
        )
        return LavaResult(self.grid, self.paths, self.volcanoes)

    def find_rim_point(self, volcano: Volcano) -> Optional[Point]:
        """Lowest land cell on the ring just outside the caldera, or None."""
        target = int(volcano.caldera_radius) + self.RIM_OFFSET
        cx, cz = volcano.center
        x0, x1 = max(cx - target - 1, 0), min(cx + target + 2, self.width)
        z0, z1 = max(cz - target - 1, 0), min(cz + target + 2, self.depth)
        if x0 >= x1 or z0 >= z1:
            return None
        xs, zs = np.ogrid[x0:x1, z0:z1]
        d = np.hypot(xs - cx, zs - cz)
        window = self.grid.heights[x0:x1, z0:z1]
        ring = (np.abs(d - target) < 0.5) & (window >= 1)
        if not np.any(ring):
            return None
        candidates = np.where(ring, window, np.inf)
        ix, iz = np.unravel_index(int(np.argmin(candidates)), candidates.shape)
        return (x0 + int(ix), z0 + int(iz))

    def trace_path(self, volcano: Volcano) -> Optional[List[Point]]:
        """Path from the caldera rim down to the lowest reachable terrain."""
        rim = self.find_rim_point(volcano)
        if rim is None:
            return None
        cx, cz = volcano.center
        direction = normalize((rim[0] - cx, rim[1] - cz))
        start = (int(rim[0] + direction[0]), int(rim[1] + direction[1]))
        if not self.grid.in_bounds(*start):
            start = rim

        heights = self.grid.heights
        path = [start]
        point = start
        for _ in range(self.MAX_STEPS):
            next_point = self.lowest_surrounding_point(point)
            if next_point is None:
                break
            current_h = heights[point]
            next_h = heights[next_point]
            # Short climbs are allowed as long as the lava has not reached the sea
            if next_h < current_h or (next_h - self.MAX_CLIMB < current_h and next_h > 0):
                path.append(next_point)
                point = next_point
            else:
                break
        return path

    def lowest_surrounding_point(self, center: Point) -> Optional[Point]:
        """Lowest in-bounds cell among the 8 neighbours of ``center``."""
        heights = self.grid.heights
        lowest_height = np.inf
        lowest = None
        for x in range(center[0] - 1, center[0] + 2):
            for z in range(center[1] - 1, center[1] + 2):
                if (x, z) == center or not self.grid.in_bounds(x, z):
                    continue
                if heights[x, z] < lowest_height:
                    lowest_height = heights[x, z]
                    lowest = (x, z)
        return lowest

    def noise_points(self, center: Point) -> None:
        """Roughen and recolor the corridor around a path point, once per cell."""
        heights = self.grid.heights
        r = self.CORRIDOR
        for x in range(center[0] - r, center[0] + r + 1):
            for z in range(center[1] - r, center[1] + r + 1):
                if not self.grid.in_bounds(x, z) or (x, z) in self._noised:
                    continue
                heights[x, z] += self.rng.random() * self.NOISE_RATIO
                self.grid.set_color(x, z, LAVA_COLOR)
                self._noised.add((x, z))

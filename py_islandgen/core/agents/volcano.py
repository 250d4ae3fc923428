"""Volcano agent: turns mountain tops into cones with a collapsed caldera."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import structlog

from .base import BaseAgent
from ..grid import Grid, Point
from ..spatial import blend_field

logger = structlog.get_logger()


@dataclass
class Volcano:
    """A placed volcano."""

    center: Point
    caldera_radius: float
    height: float


@dataclass
class VolcanoResult:
    """Output of the volcano agent."""

    grid: Grid
    volcanoes: List[Volcano] = field(default_factory=list)
    mountain_tops: List[Point] = field(default_factory=list)


class VolcanoAgent(BaseAgent):
    """Places volcanoes on existing mountain tops."""

    name = "volcanoes"

    CALDERA_FLOOR = 2.0  # height of the collapsed crater
    NOISE = 0.2  # noise on the slopes

    def __init__(
        self,
        grid: Grid,
        tokens: int,
        mountain_tops: List[Point],
        caldera_width: float,
        caldera_width_range: float,
        volcano_height: float,
        volcano_height_range: float,
        volcano_width: float,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the volcano agent.

        Args:
            grid: Grid to mutate
            tokens: Number of volcanoes
            mountain_tops: Mountain tops, each one claimed is removed
            caldera_width: Radius of the caldera
            caldera_width_range: Total variation of the caldera radius
            volcano_height: Height of the volcano peak
            volcano_height_range: Total variation of the peak height
            volcano_width: Radius of the cone
            rng: Random generator
        """
        super().__init__(grid, tokens, rng)
        if mountain_tops is None:
            raise ValueError("VolcanoAgent requires the mountain tops produced by MountainAgent")
        self.mountain_tops = mountain_tops
        self.caldera_width = caldera_width
        self.caldera_width_range = caldera_width_range
        self.volcano_height = volcano_height
        self.volcano_height_range = volcano_height_range
        self.volcano_width = volcano_width
        self.volcanoes: List[Volcano] = []

    def run(self) -> VolcanoResult:
        """Generate up to ``tokens`` volcanoes."""
        for _ in range(self.tokens):
            if not self.mountain_tops:
                logger.info("No mountain tops left for volcanoes", placed=len(self.volcanoes))
                break
            center = self.mountain_tops.pop(int(self.rng.integers(len(self.mountain_tops))))
            self.volcanoes.append(self.build_volcano(center))

        logger.info(
            "Volcanoes generated",
            requested=self.tokens,
            placed=len(self.volcanoes),
            mountain_tops_remaining=len(self.mountain_tops),
        )
        return VolcanoResult(self.grid, self.volcanoes, self.mountain_tops)

    def build_volcano(self, center: Point) -> Volcano:
        """Shape the cone and caldera around ``center``."""
        half_height = self.volcano_height_range / 2
        height = self.volcano_height + self.rng.random() * self.volcano_height_range - half_height
        slope = height / self.volcano_width
        self.grid.heights[center] = height

        caldera = (
            self.caldera_width
            + self.rng.random() * self.caldera_width_range
            - self.caldera_width_range / 2
        )

        heights = self.grid.heights
        width = self.volcano_width
        reach = int(np.ceil(width))
        cx, cz = center
        x0, x1 = max(cx - reach, 0), min(cx + reach + 1, self.width)
        z0, z1 = max(cz - reach, 0), min(cz + reach + 1, self.depth)

        # Influence of the remaining mountain tops, read before the cone is cut
        tops_blend, _ = blend_field(
            self.grid.shape, self.mountain_tops, self._top_heights(), width
        )

        xs, zs = np.ogrid[x0:x1, z0:z1]
        d = np.hypot(xs - cx, zs - cz)
        window = heights[x0:x1, z0:z1]
        land = window != 0
        in_cone = land & (d <= width)
        in_caldera = in_cone & (d < caldera)
        on_slope = in_cone & ~in_caldera

        noise = self.rng.random(window.shape) * self.NOISE - self.NOISE / 2
        blend = tops_blend[x0:x1, z0:z1]
        profile = ((blend * d) + (height - slope * d) * (width - d)) / width + noise
        raise_mask = on_slope & (profile > window)

        window[raise_mask] = profile[raise_mask]
        window[in_caldera] = self.CALDERA_FLOOR

        logger.debug(
            "Volcano placed", center=center, height=float(height), caldera=float(caldera)
        )
        return Volcano(center=center, caldera_radius=float(caldera), height=float(height))

    def _top_heights(self) -> np.ndarray:
        if not self.mountain_tops:
            return np.empty(0, dtype=np.float64)
        arr = np.asarray(self.mountain_tops)
        return self.grid.heights[arr[:, 0], arr[:, 1]].astype(np.float64)

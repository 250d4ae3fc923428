"""Beach agent: flattens stretches of low coast and the land just behind them."""

from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from .base import BaseAgent
from ..grid import Grid, Point
from ..spatial import PointSet
from ...utils.random import randint

logger = structlog.get_logger()


@dataclass
class BeachResult:
    """Output of the beach agent."""

    grid: Grid
    coastline: PointSet
    beaches: int


class BeachAgent(BaseAgent):
    """Creates a number of beaches along the coast."""

    name = "beach"

    FLAT_RADIUS = 4  # flattening radius (the square extends FLAT_RADIUS // 2)
    BEACH_RANGE = 0.2  # maximum extra height of the sand
    NUMBER_OF_WALKS = 100  # maximum random-walk steps inland
    INLAND_ATTEMPTS = 10
    INLAND_CANDIDATE_MAX_HEIGHT = 2.0

    def __init__(
        self,
        grid: Grid,
        tokens: int,
        coastline: PointSet,
        number_of_beaches: int,
        inland_distance: int,
        sea_level: float,
        max_height: float,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the beach agent.

        Args:
            grid: Grid to mutate
            tokens: Maximum number of coastal points in a single beach
            coastline: Coastal points, consumed as beaches are laid
            number_of_beaches: Number of separate beaches
            inland_distance: Distance of the first inland point from the coast
            sea_level: Base height of the sand
            max_height: Coast or inland cells above this are left alone
            rng: Random generator
        """
        super().__init__(grid, tokens, rng)
        if coastline is None:
            raise ValueError("BeachAgent requires the coastline produced by CoastAgent")
        self.coastline = coastline
        self.number_of_beaches = number_of_beaches
        self.inland_distance = inland_distance
        self.sea_level = sea_level
        self.max_height = max_height

    def run(self) -> BeachResult:
        """Create the beaches."""
        created = 0
        for _ in range(self.number_of_beaches):
            if self.generate_beach():
                created += 1
        logger.info(
            "Beaches generated",
            requested=self.number_of_beaches,
            created=created,
            coastal_remaining=len(self.coastline),
        )
        return BeachResult(self.grid, self.coastline, created)

    def generate_beach(self) -> bool:
        """Lay a single beach; False when no coastal point was available."""
        position = self.coastline.choice(self.rng)
        if position is None:
            return False

        heights = self.grid.heights
        flattened_any = False
        for _ in range(self.tokens):
            # Coast too high for sand, try another point
            if heights[position] > self.max_height:
                self.coastline.discard(position)
                position = self.coastline.choice(self.rng)
                if position is None:
                    return flattened_any
                continue

            self.flatten(position)
            flattened_any = True

            inland = self.find_inland_point(position)
            if inland is None:
                inland = position
            for _ in range(self.NUMBER_OF_WALKS):
                if heights[inland] > self.max_height:
                    break
                self.flatten(inland)
                inland = (
                    inland[0] + randint(self.rng, -1, 1),
                    inland[1] + randint(self.rng, -1, 1),
                )
                if not self.is_on_land(inland):
                    break

            # Continue with an adjacent coastal point that has not been processed yet
            self.coastline.discard(position)
            next_position = None
            for z in range(position[1] - 1, position[1] + 2):
                for x in range(position[0] - 1, position[0] + 2):
                    candidate = (x, z)
                    if self.on_coast(candidate) and candidate in self.coastline:
                        next_position = candidate
            if next_position is None:
                break
            position = next_position

        return flattened_any

    def on_coast(self, point: Point) -> bool:
        """Sand-level land touching an ocean cell."""
        x, z = point
        if not self.grid.in_bounds(x, z):
            return False
        heights = self.grid.heights
        if heights[x, z] < self.sea_level:
            return False
        x0, x1 = max(x - 1, 0), min(x + 2, self.width)
        z0, z1 = max(z - 1, 0), min(z + 2, self.depth)
        return bool(np.any(heights[x0:x1, z0:z1] == 0))

    def flatten(self, point: Point) -> None:
        """Level the square around ``point`` to sea level plus a little sand."""
        half = self.FLAT_RADIUS // 2
        x, z = point
        x0, x1 = max(x - half, 0), min(x + half + 1, self.width)
        z0, z1 = max(z - half, 0), min(z + half + 1, self.depth)
        if x0 >= x1 or z0 >= z1:
            return
        window = self.grid.heights[x0:x1, z0:z1]
        # Underwater and high cells are left alone
        target = (window >= self.sea_level) & (window <= self.max_height)
        sand = self.sea_level + self.rng.random(window.shape) * self.BEACH_RANGE
        window[target] = sand[target]

    def find_inland_point(self, point: Point) -> Optional[Point]:
        """
        Point ``inland_distance`` steps inland from a coastal point.

        Returns:
            The inland point, or None when none was found
        """
        heights = self.grid.heights
        for _ in range(self.INLAND_ATTEMPTS):
            candidate = (
                point[0] + randint(self.rng, -1, 1),
                point[1] + randint(self.rng, -1, 1),
            )
            if not self.grid.in_bounds(*candidate):
                return None
            if candidate == point:
                continue
            h = heights[candidate]
            if h < self.sea_level or h > self.INLAND_CANDIDATE_MAX_HEIGHT:
                continue
            step = (candidate[0] - point[0], candidate[1] - point[1])
            inland = (
                point[0] + self.inland_distance * step[0],
                point[1] + self.inland_distance * step[1],
            )
            if self.is_on_land(inland):
                return inland
        return None

    def is_on_land(self, point: Point) -> bool:
        return self.grid.in_bounds(*point) and self.grid.heights[point] >= self.sea_level

"""Noise agent: random height perturbation of land cells."""

from typing import Optional

import numpy as np
import structlog

from .base import BaseAgent
from ..grid import Grid

logger = structlog.get_logger()


class NoiseAgent(BaseAgent):
    """Adds random bumps to the land, ``tokens`` passes over the grid."""

    name = "noise"

    def __init__(
        self,
        grid: Grid,
        tokens: int,
        chance: float,
        min_height: float,
        max_height: float,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize the noise agent.

        Args:
            grid: Grid to mutate
            tokens: Number of passes
            chance: Chance (percent) that a land cell is changed per pass
            min_height: Lower bound of the height change
            max_height: Upper bound of the height change
            rng: Random generator
        """
        super().__init__(grid, tokens, rng)
        if not 0 <= chance <= 100:
            raise ValueError(f"chance must be within [0, 100], got {chance}")
        if min_height > max_height:
            raise ValueError(f"min_height ({min_height}) > max_height ({max_height})")
        self.chance = chance
        self.min_height = min_height
        self.max_height = max_height

    def run(self) -> Grid:
        heights = self.grid.heights
        changed = 0
        for _ in range(self.tokens):
            land = heights >= 1
            hit = land & (self.rng.random(heights.shape) < self.chance / 100)
            count = int(hit.sum())
            if count == 0:
                continue
            delta = self.min_height + self.rng.random(count) * (self.max_height - self.min_height)
            heights[hit] += delta.astype(np.float32)
            changed += count

        logger.info("Noise applied", passes=self.tokens, chance=self.chance, cells_changed=changed)
        return self.grid

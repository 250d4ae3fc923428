"""Base class and shared helpers for terrain agents."""

import math
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

import numpy as np

from ..grid import Grid
from ...utils.random import make_rng

Vector = Tuple[float, float]


class BaseAgent(ABC):
    """
    A stateful algorithm that mutates a grid in place.

    Every agent owns the grid for the duration of ``run()`` and draws all of
    its randomness from ``rng``.
    """

    name = "agent"

    def __init__(self, grid: Grid, tokens: int, rng: Optional[np.random.Generator] = None):
        """
        Initialize the agent.

        Args:
            grid: Grid to mutate
            tokens: Work budget, its meaning depends on the agent
            rng: Random generator, a fresh unseeded one if omitted
        """
        if grid is None:
            raise ValueError(f"{type(self).__name__} requires a grid")
        if tokens < 0:
            raise ValueError(f"tokens must be non-negative, got {tokens}")
        self.grid = grid
        self.width = grid.width
        self.depth = grid.depth
        self.tokens = tokens
        self.rng = rng if rng is not None else make_rng()

    @abstractmethod
    def run(self) -> Any:
        """Execute the agent and return its result."""

    def random_unit_vector(self) -> Vector:
        """Uniformly distributed direction."""
        x, y = 0.0, 0.0
        while x == 0 and y == 0:
            x = self.rng.random() * 2 - 1
            y = self.rng.random() * 2 - 1
        length = math.hypot(x, y)
        return (x / length, y / length)

    def direction_in_cone(self, direction: Vector, cone_degrees: float) -> Vector:
        """
        Random direction at most ``cone_degrees / 2`` away from ``direction``.

        A zero vector is treated as pointing along +x.
        """
        base = math.atan2(direction[1], direction[0]) if direction != (0.0, 0.0) else 0.0
        offset = math.radians(self.rng.random() * cone_degrees - cone_degrees / 2)
        angle = base + offset
        return (math.cos(angle), math.sin(angle))


def normalize(vector: Vector) -> Vector:
    """Unit vector in the direction of ``vector`` (zero stays zero)."""
    length = math.hypot(vector[0], vector[1])
    if length == 0:
        return (0.0, 0.0)
    return (vector[0] / length, vector[1] / length)

"""
Coastline agent.

Grows a single landmass from the map centre. The work is split into agent
tasks that each own a token budget: tasks above the budget limit split into
two children that start somewhere on the coast near their parent, tasks
below it spend their tokens promoting ocean cells next to the coast to land.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .base import BaseAgent, Vector
from ..grid import Grid, Point
from ..spatial import PointSet, WindowIndex, coastal_mask, mask_to_points

logger = structlog.get_logger()


@dataclass
class CoastResult:
    """Output of the coast agent."""

    grid: Grid
    coastline: PointSet


class CoastAgent(BaseAgent):
    """Generates the island outline with token-budgeted coastline agents."""

    name = "coast"

    RADIUS = 30  # square window in which a task picks coastal points
    START_HEIGHT = 3.0  # height of freshly created land
    MIN_LIMIT = 32  # smallest per-task budget before splitting stops
    WALK_ATTEMPTS = 5
    ATTRACTOR_OFFSET = 10

    def __init__(
        self,
        grid: Grid,
        tokens: int,
        border_size: int,
        rng: Optional[np.random.Generator] = None,
        limit: Optional[int] = None,
    ):
        """
        Initialize the coast agent.

        Args:
            grid: Grid to grow the island on
            tokens: Maximum number of cells the land will consist of
            border_size: Margin near the map edge where land cannot be placed
            rng: Random generator
            limit: Budget below which a task stops splitting
                (default ``max(tokens // 4096, MIN_LIMIT)``)
        """
        super().__init__(grid, tokens, rng)
        if border_size < 0:
            raise ValueError(f"border_size must be non-negative, got {border_size}")
        self.border_size = border_size
        self.limit = limit if limit is not None else max(tokens // 4096, self.MIN_LIMIT)
        if self.limit < 1:
            raise ValueError(f"limit must be at least 1, got {self.limit}")
        self.coastline = PointSet()
        self._index = WindowIndex(self.RADIUS)

    def run(self) -> CoastResult:
        """Seed the centre cell and grow the coastline from it."""
        center = (self.width // 2, self.depth // 2)
        self._promote(center)

        tasks: List[Tuple[Point, int]] = [(center, self.tokens)]
        splits = 0
        while tasks:
            agent, tokens = tasks.pop()
            in_radius = self._index.window(agent, self.RADIUS)

            if tokens >= self.limit:
                splits += 1
                children = []
                for _ in range(2):
                    if in_radius:
                        start = in_radius[int(self.rng.integers(len(in_radius)))]
                    else:
                        start = self.coastline.choice(self.rng)
                    if start is not None:
                        children.append((start, tokens // 2))
                # Reversed so the first child runs first
                tasks.extend(reversed(children))
            else:
                self._grow(agent, tokens, PointSet(in_radius))

        self.coastline = PointSet(
            mask_to_points(coastal_mask(self.grid.heights, self.border_size))
        )
        logger.info(
            "Coastline generated",
            tokens=self.tokens,
            limit=self.limit,
            splits=splits,
            land_cells=int(np.count_nonzero(self.grid.heights > 0)),
            coastal_cells=len(self.coastline),
        )
        return CoastResult(self.grid, self.coastline)

    def _grow(self, agent: Point, tokens: int, in_radius: PointSet) -> None:
        """Spend ``tokens`` extending the coast around ``agent``."""
        if not self.on_coast(*agent):
            agent = self.try_walk(agent)
            if agent is None:
                return

        repellor, attractor = self._repellor_attractor(agent)

        for _ in range(tokens):
            vertex = self._pick_coastal(in_radius)
            if vertex is None:
                break
            best = self._best_neighbor(vertex, repellor, attractor)
            if best is None:
                in_radius.discard(vertex)
                self._forget(vertex)
                continue
            self._promote(best)
            in_radius.add(best)

    def _pick_coastal(self, in_radius: PointSet) -> Optional[Point]:
        """Random coastal point of the task, dropping stale ones as found."""
        while len(in_radius):
            vertex = in_radius.choice(self.rng)
            if self.on_coast(*vertex):
                return vertex
            in_radius.discard(vertex)
            self._forget(vertex)
        return None

    def _repellor_attractor(self, agent: Point) -> Tuple[Vector, Vector]:
        """Repellor and attractor offsets placed in opposite quadrants."""
        low, high = -self.ATTRACTOR_OFFSET, self.ATTRACTOR_OFFSET + 1
        rep = [int(self.rng.integers(low, high)), int(self.rng.integers(low, high))]
        att = [int(self.rng.integers(low, high)), int(self.rng.integers(low, high))]
        for axis in range(2):
            if np.sign(att[axis]) == np.sign(rep[axis]):
                att[axis] *= -1
        repellor = (agent[0] + rep[0], agent[1] + rep[1])
        attractor = (agent[0] + att[0], agent[1] + att[1])
        return repellor, attractor

    def _best_neighbor(
        self, vertex: Point, repellor: Vector, attractor: Vector
    ) -> Optional[Point]:
        """Highest scoring ocean cell in the 3x3 block around ``vertex``."""
        heights = self.grid.heights
        best_score = -np.inf
        best = None
        for z in range(vertex[1] - 1, vertex[1] + 2):
            for x in range(vertex[0] - 1, vertex[0] + 2):
                if not self._inside_border(x, z):
                    continue
                if heights[x, z] > 0:
                    continue
                edge = min(x, self.width - 1 - x, z, self.depth - 1 - z)
                score = (
                    (repellor[0] - x) ** 2 + (repellor[1] - z) ** 2
                    - ((attractor[0] - x) ** 2 + (attractor[1] - z) ** 2)
                    + 3 * edge ** 2
                )
                if score > best_score:
                    best_score = score
                    best = (x, z)
        return best

    def _inside_border(self, x: int, z: int) -> bool:
        b = self.border_size
        return b <= x < self.width - b and b <= z < self.depth - b

    def _promote(self, point: Point) -> None:
        self.grid.heights[point] = self.START_HEIGHT
        self.coastline.add(point)
        self._index.add(point)

    def _forget(self, point: Point) -> None:
        self.coastline.discard(point)
        self._index.discard(point)

    def on_coast(self, x: int, z: int) -> bool:
        """Land (height >= 1) with an ocean cell among its neighbours inside the border."""
        heights = self.grid.heights
        if heights[x, z] < 1:
            return False
        for zz in range(z - 1, z + 2):
            for xx in range(x - 1, x + 2):
                if not self._inside_border(xx, zz):
                    continue
                if heights[xx, zz] == 0:
                    return True
        return False

    def try_walk(self, agent: Point) -> Optional[Point]:
        """Walk in random directions until the coast is reached, None after repeated failure."""
        for _ in range(self.WALK_ATTEMPTS):
            found = self.walk(agent, self.random_unit_vector())
            if found is not None:
                return found
        return None

    def walk(self, start: Point, direction: Vector) -> Optional[Point]:
        """Straight walk from ``start``; first coastal cell reached or None."""
        position = start
        fx, fz = float(start[0]), float(start[1])
        for _ in range(max(self.width, self.depth)):
            if not self.grid.in_bounds(*position):
                break
            if self.on_coast(*position):
                return position
            fx += direction[0]
            fz += direction[1]
            position = (int(round(fx)), int(round(fz)))
        return None

"""
Mountain and hill agents.

Both grow ridgelines with a directed random walk that starts inland and
heads away from the coast, recording a ridge top every few steps. Once all
ranges are walked the ridge tops are diffused over the surrounding land with
an inverse-distance blend.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import structlog

from .base import BaseAgent, normalize
from ..grid import Grid, Point
from ..spatial import CoastIndex, PointSet, blend_field, mask_to_points
from ...utils.random import randint

logger = structlog.get_logger()

COMBINE_MODES = ("max", "add")


@dataclass
class MountainResult:
    """Output of the mountain agent."""

    grid: Grid
    mountain_vertices: List[Point] = field(default_factory=list)
    mountain_tops: List[Point] = field(default_factory=list)


@dataclass
class HillResult:
    """Output of the hill agent."""

    grid: Grid
    hill_tops: List[Point] = field(default_factory=list)
    mountain_tops: List[Point] = field(default_factory=list)
    claimed_tops: List[Point] = field(default_factory=list)


class RidgeAgent(BaseAgent):
    """Shared ridge growth and diffusion."""

    CONE_DEGREES = 180.0
    HEIGHT_VARIATION = 10.0
    PEAK_INTERVAL = 20  # a ridge top every PEAK_INTERVAL steps
    TURN_INTERVAL = 50  # new heading every TURN_INTERVAL steps
    MAX_START_ATTEMPTS = 10

    _ABORT, _RETRY, _DONE = range(3)

    def __init__(
        self,
        grid: Grid,
        coastline: PointSet,
        min_count: int,
        max_count: int,
        min_length: int,
        max_length: int,
        max_height: float,
        width: int,
        combine: str,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Initialize a ridge agent.

        Args:
            grid: Grid to mutate
            coastline: Coastal points, ridges head away from the nearest one
            min_count: Minimum number of ranges
            max_count: Maximum number of ranges
            min_length: Minimum walk length of a range
            max_length: Maximum walk length of a range
            max_height: Height of the ridge tops
            width: Radius over which ridge tops are diffused
            combine: "max" to keep the higher of old and blended height,
                "add" to add the blend to the existing terrain (ridge tops
                keep the height the walk gave them)
            rng: Random generator
        """
        super().__init__(grid, 0, rng)
        if coastline is None:
            raise ValueError(f"{type(self).__name__} requires the coastline produced by CoastAgent")
        if min_count > max_count or min_length > max_length:
            raise ValueError("min values must not exceed max values")
        if combine not in COMBINE_MODES:
            raise ValueError(f"combine must be one of {COMBINE_MODES}, got {combine!r}")
        self.coast = CoastIndex(coastline)
        self.min_count = min_count
        self.max_count = max_count
        self.min_length = min_length
        self.max_length = max_length
        self.max_height = max_height
        self.ridge_width = width
        self.combine = combine
        self.tops: List[Point] = []
        self.aborted = 0

    def pick_start(self) -> Optional[Point]:
        raise NotImplementedError

    def is_underwater(self, height: float) -> bool:
        raise NotImplementedError

    def too_close_to_coast(self, point: Point) -> bool:
        return False

    def on_top(self, point: Point) -> None:
        """Hook called for each recorded ridge top."""

    def generate_ranges(self) -> int:
        """Walk all ranges; returns how many were attempted."""
        count = randint(self.rng, self.min_count, self.max_count)
        for _ in range(count):
            length = randint(self.rng, self.min_length, self.max_length)
            self.generate_range(length)
        return count

    def generate_range(self, length: int) -> None:
        """Walk a single range, retrying the start when its first peak is rejected."""
        for _ in range(self.MAX_START_ATTEMPTS):
            start = self.pick_start()
            if start is None:
                return
            outcome = self.walk_ridge(start, length)
            if outcome != self._RETRY:
                if outcome == self._ABORT:
                    self.aborted += 1
                return
        self.aborted += 1

    def walk_ridge(self, start: Point, length: int) -> int:
        """Directed random walk from ``start`` recording ridge tops."""
        nearest = self.coast.nearest(start)
        if nearest is None:
            return self._ABORT
        coast_point, _ = nearest
        base = normalize((start[0] - coast_point[0], start[1] - coast_point[1]))
        if base == (0.0, 0.0):
            base = self.random_unit_vector()
        direction = self.direction_in_cone(base, self.CONE_DEGREES)

        heights = self.grid.heights
        fx, fz = float(start[0]), float(start[1])
        for i in range(length):
            if i > 0 and i % self.TURN_INTERVAL == 0:
                direction = self.direction_in_cone(base, self.CONE_DEGREES)
            fx += direction[0]
            fz += direction[1]
            point = (math.floor(fx), math.floor(fz))
            if not self.grid.in_bounds(*point):
                return self._ABORT
            if self.is_underwater(heights[point]):
                return self._ABORT
            if i % self.PEAK_INTERVAL == 0:
                if self.too_close_to_coast(point):
                    return self._RETRY if i == 0 else self._ABORT
                heights[point] = self.max_height - self.rng.random() * self.HEIGHT_VARIATION
                self.tops.append(point)
                self.on_top(point)
        return self._DONE

    def peak_heights(self, peaks: List[Point]) -> np.ndarray:
        """Snapshot of the current heights of ``peaks``."""
        if not peaks:
            return np.empty(0, dtype=np.float64)
        arr = np.asarray(peaks)
        return self.grid.heights[arr[:, 0], arr[:, 1]].astype(np.float64)

    def apply(self, affected: np.ndarray, values: np.ndarray) -> None:
        """Combine ``values`` into the heights of the ``affected`` cells."""
        heights = self.grid.heights
        if self.combine == "add":
            # ridge tops already carry their own height
            own = np.zeros(heights.shape, dtype=bool)
            if self.tops:
                arr = np.asarray(self.tops)
                own[arr[:, 0], arr[:, 1]] = True
            keep = ~own[affected]
            target = affected & ~own
            heights[target] += values[keep].astype(np.float32)
        else:
            current = heights[affected]
            heights[affected] = np.maximum(current, values.astype(np.float32))


class MountainAgent(RidgeAgent):
    """Generates mountain ranges."""

    name = "mountains"

    CONE_DEGREES = 180.0
    NOISE_RATIO = 0.1  # noise on the diffused slopes
    MOUNTAIN_THRESHOLD = 2.0  # height gain above this marks a mountain vertex

    def __init__(
        self,
        grid: Grid,
        coastline: PointSet,
        min_count: int,
        max_count: int,
        min_length: int,
        max_length: int,
        max_height: float,
        width: int,
        rng: Optional[np.random.Generator] = None,
        combine: str = "max",
    ):
        super().__init__(
            grid, coastline, min_count, max_count, min_length, max_length,
            max_height, width, combine, rng,
        )
        self.mountain_vertices: List[Point] = []

    def run(self) -> MountainResult:
        ranges = self.generate_ranges()
        self.elevate()
        logger.info(
            "Mountains generated",
            ranges=ranges,
            aborted=self.aborted,
            tops=len(self.tops),
            mountain_vertices=len(self.mountain_vertices),
        )
        return MountainResult(self.grid, self.mountain_vertices, self.tops)

    def pick_start(self) -> Optional[Point]:
        """Any land cell."""
        land = np.flatnonzero(self.grid.heights >= 1)
        if land.size == 0:
            return None
        flat = int(land[int(self.rng.integers(land.size))])
        return (flat // self.depth, flat % self.depth)

    def is_underwater(self, height: float) -> bool:
        return height <= 1

    def too_close_to_coast(self, point: Point) -> bool:
        return self.coast.distance(point) < self.ridge_width / 2

    def elevate(self) -> None:
        """Diffuse the ridge tops over the land around them."""
        if not self.tops:
            return
        blended, weight = blend_field(
            self.grid.shape, self.tops, self.peak_heights(self.tops), self.ridge_width
        )
        affected = (self.grid.heights >= 1) & (weight > 0)
        values = blended[affected] + (
            self.rng.random(int(affected.sum())) * self.NOISE_RATIO - self.NOISE_RATIO / 2
        )
        before = self.grid.heights.copy()
        self.apply(affected, values)
        gained = self.grid.heights - before
        self.mountain_vertices = mask_to_points(affected & (gained > self.MOUNTAIN_THRESHOLD))


class HillAgent(RidgeAgent):
    """Generates hill chains on the lower flanks of the mountains."""

    name = "hills"

    CONE_DEGREES = 90.0
    MAX_START_HEIGHT = 10.0  # hills start on mountain terrain at most this high

    def __init__(
        self,
        grid: Grid,
        coastline: PointSet,
        mountain_vertices: List[Point],
        mountain_tops: List[Point],
        min_count: int,
        max_count: int,
        min_length: int,
        max_length: int,
        max_height: float,
        width: int,
        rng: Optional[np.random.Generator] = None,
        combine: str = "max",
    ):
        super().__init__(
            grid, coastline, min_count, max_count, min_length, max_length,
            max_height, width, combine, rng,
        )
        if mountain_vertices is None or mountain_tops is None:
            raise ValueError("HillAgent requires the mountain vertices and tops produced by MountainAgent")
        self.mountain_tops = mountain_tops
        self.claimed: List[Point] = []
        self.possible_positions = PointSet(
            p for p in mountain_vertices if grid.heights[p] <= self.MAX_START_HEIGHT
        )

    def run(self) -> HillResult:
        ranges = self.generate_ranges()
        self.elevate()
        logger.info(
            "Hills generated",
            ranges=ranges,
            aborted=self.aborted,
            tops=len(self.tops),
            claimed_mountain_tops=len(self.claimed),
        )
        return HillResult(self.grid, self.tops, self.mountain_tops, self.claimed)

    def pick_start(self) -> Optional[Point]:
        """A possible hill position, each used at most once."""
        start = self.possible_positions.choice(self.rng)
        if start is None:
            return None
        self.possible_positions.discard(start)
        self.claim(start)
        return start

    def is_underwater(self, height: float) -> bool:
        return height == 0

    def on_top(self, point: Point) -> None:
        self.claim(point)

    def claim(self, point: Point) -> None:
        """Take a mountain top over as part of a hill chain."""
        if point in self.mountain_tops:
            self.mountain_tops.remove(point)
            self.claimed.append(point)

    def elevate(self) -> None:
        """Blend hill tops together with the mountain tops around them."""
        if not self.tops:
            return
        shape = self.grid.shape
        _, hill_weight = blend_field(
            shape, self.tops, self.peak_heights(self.tops), self.ridge_width
        )
        peaks = self.tops + list(self.mountain_tops)
        blended, _ = blend_field(shape, peaks, self.peak_heights(peaks), self.ridge_width)
        affected = (self.grid.heights >= 1) & (hill_weight > 0)
        self.apply(affected, blended[affected])

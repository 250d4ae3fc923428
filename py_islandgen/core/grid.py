"""Grid of terrain samples shared by all agents."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

Color = Tuple[int, int, int]
Point = Tuple[int, int]


class Direction(Enum):
    """Cardinal directions on the grid (z grows to the north)."""

    NORTH = (0, 1)
    SOUTH = (0, -1)
    WEST = (-1, 0)
    EAST = (1, 0)

    @property
    def offset(self) -> Point:
        return self.value


@dataclass
class Sample:
    """A single grid sample: position, height and optional color override."""

    x: int
    z: int
    height: float
    color: Optional[Color] = None  # None = renderer uses its height gradient

    @property
    def position(self) -> Tuple[float, float, float]:
        return (float(self.x), float(self.height), float(self.z))


class Grid:
    """
    Dense ``width x depth`` array of samples indexed ``[x, z]``.

    Heights are stored as float32, colors as a uint8 RGB array plus a mask
    of cells with an explicit color. Height 0 is the ocean, anything above
    is land.
    """

    def __init__(self, width: int, depth: int, heights: Optional[np.ndarray] = None):
        if width < 1 or depth < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{depth}")
        self.width = width
        self.depth = depth

        if heights is None:
            self.heights = np.zeros((width, depth), dtype=np.float32)
        else:
            if heights.shape != (width, depth):
                raise ValueError(
                    f"Heights shape {heights.shape} does not match grid {width}x{depth}"
                )
            self.heights = heights.astype(np.float32, copy=True)

        self.colors = np.zeros((width, depth, 3), dtype=np.uint8)
        self.color_set = np.zeros((width, depth), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.width, self.depth)

    def in_bounds(self, x: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= z < self.depth

    def _check(self, x: int, z: int) -> None:
        if not self.in_bounds(x, z):
            raise IndexError(
                f"Point ({x}, {z}) outside grid {self.width}x{self.depth}"
            )

    def get(self, x: int, z: int) -> Sample:
        """Return the sample at ``(x, z)``."""
        self._check(x, z)
        color = tuple(int(c) for c in self.colors[x, z]) if self.color_set[x, z] else None
        return Sample(x, z, float(self.heights[x, z]), color)

    def set(self, x: int, z: int, sample: Sample) -> None:
        """Store height and color of ``sample`` at ``(x, z)``."""
        self._check(x, z)
        self.heights[x, z] = sample.height
        if sample.color is None:
            self.color_set[x, z] = False
            self.colors[x, z] = 0
        else:
            self.colors[x, z] = sample.color
            self.color_set[x, z] = True

    def height(self, x: int, z: int) -> float:
        self._check(x, z)
        return float(self.heights[x, z])

    def set_height(self, x: int, z: int, height: float) -> None:
        self._check(x, z)
        self.heights[x, z] = height

    def set_color(self, x: int, z: int, color: Color) -> None:
        self._check(x, z)
        self.colors[x, z] = color
        self.color_set[x, z] = True

    def neighbors4(self, x: int, z: int) -> Dict[Direction, Sample]:
        """In-bounds cardinal neighbours of ``(x, z)``, no wraparound."""
        self._check(x, z)
        neighbors = {}
        for direction in Direction:
            dx, dz = direction.offset
            nx, nz = x + dx, z + dz
            if self.in_bounds(nx, nz):
                neighbors[direction] = self.get(nx, nz)
        return neighbors

    def is_land(self, x: int, z: int) -> bool:
        self._check(x, z)
        return bool(self.heights[x, z] > 0)

    def land_mask(self, threshold: float = 1.0) -> np.ndarray:
        """Boolean mask of cells at or above ``threshold``."""
        return self.heights >= threshold

    def copy(self) -> "Grid":
        other = Grid(self.width, self.depth, self.heights)
        other.colors = self.colors.copy()
        other.color_set = self.color_set.copy()
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self.shape == other.shape
            and np.array_equal(self.heights, other.heights)
            and np.array_equal(self.color_set, other.color_set)
            and np.array_equal(self.colors, other.colors)
        )

    def __repr__(self) -> str:
        return f"Grid(width={self.width}, depth={self.depth})"

"""
Spatial queries shared by the terrain agents.

This module provides:
- PointSet, an insertion-ordered set of grid points with seeded random choice
- Nearest-point searches (brute force and KD-tree backed)
- Inverse-distance blending of peak heights, for one point or a whole grid
- The vectorized "on coast" test
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
from scipy import ndimage
from sklearn.neighbors import KDTree

from .grid import Point


class PointSet:
    """
    Set of grid points that keeps insertion order.

    Removal swaps the last element into the freed slot, so add, discard,
    membership and random choice are all O(1). Iteration order only depends
    on the sequence of operations, which keeps seeded runs reproducible.
    """

    def __init__(self, points: Iterable[Point] = ()):
        self._items: List[Point] = []
        self._index: Dict[Point, int] = {}
        for point in points:
            self.add(point)

    def add(self, point: Point) -> None:
        point = (int(point[0]), int(point[1]))
        if point in self._index:
            return
        self._index[point] = len(self._items)
        self._items.append(point)

    def discard(self, point: Point) -> None:
        point = (int(point[0]), int(point[1]))
        idx = self._index.pop(point, None)
        if idx is None:
            return
        last = self._items.pop()
        if idx < len(self._items):
            self._items[idx] = last
            self._index[last] = idx

    def choice(self, rng: np.random.Generator) -> Optional[Point]:
        """Random member, or None when the set is empty."""
        if not self._items:
            return None
        return self._items[int(rng.integers(len(self._items)))]

    def copy(self) -> "PointSet":
        return PointSet(self._items)

    def __contains__(self, point: object) -> bool:
        return point in self._index

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Point]:
        return iter(list(self._items))

    def __getitem__(self, idx: int) -> Point:
        return self._items[idx]

    def __repr__(self) -> str:
        return f"PointSet({len(self._items)} points)"


class WindowIndex:
    """
    Bucketed point set answering square-window queries.

    Points are kept in buckets of ``cell_size``; a window query only scans
    the buckets the window overlaps.
    """

    def __init__(self, cell_size: int, points: Iterable[Point] = ()):
        if cell_size < 1:
            raise ValueError(f"cell_size must be positive, got {cell_size}")
        self.cell_size = cell_size
        self._buckets: Dict[Point, PointSet] = {}
        for point in points:
            self.add(point)

    def _key(self, point: Point) -> Point:
        return (point[0] // self.cell_size, point[1] // self.cell_size)

    def add(self, point: Point) -> None:
        self._buckets.setdefault(self._key(point), PointSet()).add(point)

    def discard(self, point: Point) -> None:
        bucket = self._buckets.get(self._key(point))
        if bucket is not None:
            bucket.discard(point)

    def window(self, center: Point, radius: int) -> List[Point]:
        """Points with ``|dx| < radius`` and ``|dz| < radius`` from ``center``."""
        cx, cz = center
        bx0, bz0 = self._key((cx - radius, cz - radius))
        bx1, bz1 = self._key((cx + radius, cz + radius))
        found = []
        for bx in range(bx0, bx1 + 1):
            for bz in range(bz0, bz1 + 1):
                bucket = self._buckets.get((bx, bz))
                if not bucket:
                    continue
                found.extend(
                    p for p in bucket
                    if abs(p[0] - cx) < radius and abs(p[1] - cz) < radius
                )
        return found


def nearest_in_set(point: Point, points: Sequence[Point]) -> Optional[Point]:
    """
    Return the member of ``points`` closest to ``point``.

    Returns:
        The nearest point, or None if ``points`` is empty
    """
    if len(points) == 0:
        return None
    arr = np.asarray(list(points), dtype=np.float64)
    d2 = (arr[:, 0] - point[0]) ** 2 + (arr[:, 1] - point[1]) ** 2
    idx = int(np.argmin(d2))
    return (int(arr[idx, 0]), int(arr[idx, 1]))


class CoastIndex:
    """KD-tree over a fixed set of points for repeated nearest queries."""

    def __init__(self, points: Iterable[Point]):
        self.points = np.array(list(points), dtype=np.float64).reshape(-1, 2)
        self._tree = KDTree(self.points) if len(self.points) else None

    def __len__(self) -> int:
        return len(self.points)

    def nearest(self, point: Tuple[float, float]) -> Optional[Tuple[Point, float]]:
        """Nearest indexed point and its distance, or None when empty."""
        if self._tree is None:
            return None
        distances, indices = self._tree.query([[point[0], point[1]]], k=1)
        px, pz = self.points[indices[0][0]]
        return (int(px), int(pz)), float(distances[0][0])

    def distance(self, point: Tuple[float, float]) -> float:
        """Distance to the nearest indexed point (inf when empty)."""
        found = self.nearest(point)
        return float("inf") if found is None else found[1]


def inverse_distance_blend(
    point: Point,
    peaks: Sequence[Point],
    peak_heights: Sequence[float],
    max_radius: float,
) -> float:
    """
    Blend the heights of the peaks within ``max_radius`` of ``point``.

    Each peak closer than ``max_radius`` gets weight ``max_radius - d``;
    weights are normalized to sum to one and the blended height is
    ``sum(w * (h - d * h / max_radius))``. Peaks at or beyond the radius are
    ignored and no peak in range gives 0.
    """
    if len(peaks) == 0:
        return 0.0
    arr = np.asarray(peaks, dtype=np.float64).reshape(-1, 2)
    heights = np.asarray(peak_heights, dtype=np.float64)
    d = np.hypot(arr[:, 0] - point[0], arr[:, 1] - point[1])
    inside = d < max_radius
    if not np.any(inside):
        return 0.0
    d = d[inside]
    h = heights[inside]
    weights = max_radius - d
    weights = weights / weights.sum()
    return float(np.sum(weights * (h - d * h / max_radius)))


def blend_field(
    shape: Tuple[int, int],
    peaks: Sequence[Point],
    peak_heights: Sequence[float],
    max_radius: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Evaluate ``inverse_distance_blend`` for every cell of a grid.

    Each peak only touches the cells of its bounding window, clipped to the
    grid, so the cost scales with ``len(peaks) * max_radius**2``.

    Returns:
        Tuple of (blended heights, raw weight sum); both are 0 where no
        peak is in range
    """
    width, depth = shape
    weighted = np.zeros(shape, dtype=np.float64)
    weight_sum = np.zeros(shape, dtype=np.float64)
    reach = int(np.ceil(max_radius))

    for (px, pz), h in zip(peaks, peak_heights):
        x0, x1 = max(px - reach, 0), min(px + reach + 1, width)
        z0, z1 = max(pz - reach, 0), min(pz + reach + 1, depth)
        if x0 >= x1 or z0 >= z1:
            continue
        xs, zs = np.ogrid[x0:x1, z0:z1]
        d = np.hypot(xs - px, zs - pz)
        inside = d < max_radius
        w = np.where(inside, max_radius - d, 0.0)
        contribution = np.where(inside, h - d * h / max_radius, 0.0)
        weighted[x0:x1, z0:z1] += w * contribution
        weight_sum[x0:x1, z0:z1] += w

    blended = np.zeros(shape, dtype=np.float64)
    np.divide(weighted, weight_sum, out=blended, where=weight_sum > 0)
    return blended, weight_sum


def border_mask(shape: Tuple[int, int], border: int) -> np.ndarray:
    """Cells at least ``border`` away from every map edge."""
    width, depth = shape
    mask = np.zeros(shape, dtype=bool)
    if border * 2 < width and border * 2 < depth:
        mask[border:width - border, border:depth - border] = True
    return mask


def coastal_mask(
    heights: np.ndarray, border: int, land_threshold: float = 1.0
) -> np.ndarray:
    """
    Vectorized coast test.

    A cell is coastal when its height is at least ``land_threshold`` and one
    of its 8 neighbours inside the border margin has height exactly 0.
    """
    water = (heights == 0) & border_mask(heights.shape, border)
    near_water = ndimage.binary_dilation(water, structure=np.ones((3, 3), dtype=bool))
    return near_water & (heights >= land_threshold)


def mask_to_points(mask: np.ndarray) -> List[Point]:
    """Row-major (x, then z) list of the cells set in ``mask``."""
    return [(int(x), int(z)) for x, z in np.argwhere(mask)]

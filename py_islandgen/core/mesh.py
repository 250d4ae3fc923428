"""
Renderer-facing arrays for a terrain grid.

Vertices are laid out row by row along x: sample ``(x, z)`` has index
``x + z * width``. Every grid quad is split into two triangles.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .grid import Grid


@dataclass
class TerrainMesh:
    """Flat arrays ready for upload to a renderer."""

    vertices: np.ndarray  # (N, 3) float32, x / height / z
    triangles: np.ndarray  # (M, 3) uint32
    colors: np.ndarray  # (N, 3) uint8 override colors
    color_mask: np.ndarray  # (N,) bool, False = use the height gradient
    width: int
    depth: int

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.triangles)


def build_triangles(width: int, depth: int) -> np.ndarray:
    """
    Triangle indices for a ``width x depth`` vertex lattice.

    Each quad with lower corner ``v`` yields ``(v, v+W, v+1)`` and
    ``(v+1, v+W, v+W+1)``; quads are ordered row-major.

    Args:
        width: Samples per row (W)
        depth: Number of rows

    Returns:
        ``((width-1) * (depth-1) * 2, 3)`` uint32 array
    """
    if width < 2 or depth < 2:
        return np.zeros((0, 3), dtype=np.uint32)

    x = np.arange(width - 1)
    z = np.arange(depth - 1)
    v = (x[np.newaxis, :] + z[:, np.newaxis] * width).ravel()

    triangles = np.empty((len(v) * 2, 3), dtype=np.uint32)
    triangles[0::2] = np.stack([v, v + width, v + 1], axis=1)
    triangles[1::2] = np.stack([v + 1, v + width, v + width + 1], axis=1)
    return triangles


def build_vertices(grid: Grid) -> np.ndarray:
    """``(width * depth, 3)`` positions ``(x, height, z)``."""
    xs, zs = np.meshgrid(
        np.arange(grid.width, dtype=np.float32),
        np.arange(grid.depth, dtype=np.float32),
        indexing="xy",
    )
    # heights are stored [x, z]; transpose to rows of constant z
    heights = grid.heights.T
    return np.stack([xs.ravel(), heights.ravel(), zs.ravel()], axis=1).astype(np.float32)


def build_colors(grid: Grid) -> Tuple[np.ndarray, np.ndarray]:
    """Override colors and their mask in vertex order."""
    colors = grid.colors.transpose(1, 0, 2).reshape(-1, 3).copy()
    mask = grid.color_set.T.ravel().copy()
    return colors, mask


def to_mesh(grid: Grid) -> TerrainMesh:
    colors, mask = build_colors(grid)
    return TerrainMesh(
        vertices=build_vertices(grid),
        triangles=build_triangles(grid.width, grid.depth),
        colors=colors,
        color_mask=mask,
        width=grid.width,
        depth=grid.depth,
    )

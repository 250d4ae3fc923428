#!/usr/bin/env python3
"""
Demo script showing island generation and the mesh arrays handed to a renderer.
"""

import numpy as np
from py_islandgen import TerrainSettings, generate_terrain, to_mesh


def main():
    """Demonstrate island generation."""
    print("Py-IslandGen Demo")
    print("=" * 40)

    size = 257
    settings = TerrainSettings(
        border_size=10,
        mountain_min_length=80,
        mountain_max_length=150,
        mountain_width=25,
        hill_width=20,
        volcano_width=25,
    )

    def progress(stage, index, total):
        print(f"  [{index + 1:2d}/{total}] {stage}")

    print(f"\nGenerating {size}x{size} island...")
    result = generate_terrain(settings, size, size, seed="demo123", progress=progress)
    heights = result.grid.heights

    land = heights > 0
    print(f"\n  Land share: {land.mean() * 100:.1f}%")
    print(f"  Height range: {heights.min():.1f}-{heights.max():.1f}")
    print(f"  Volcanoes: {len(result.volcanoes)}")
    print(f"  Lava rivers: {len(result.lava_paths)}")

    # Show height distribution of the land
    bins = [0, 1, 5, 10, 20, 30, 50, 80]
    hist, _ = np.histogram(heights[land], bins=bins)
    print("  Height distribution:")
    for i in range(len(bins) - 1):
        bar = '#' * int(hist[i] / max(hist.max(), 1) * 20)
        print(f"    {bins[i]:3d}-{bins[i+1]:3d}: {bar} ({hist[i]})")

    mesh = to_mesh(result.grid)
    print(f"\nMesh: {mesh.vertex_count} vertices, {mesh.triangle_count} triangles, "
          f"{int(mesh.color_mask.sum())} lava-colored vertices")


if __name__ == "__main__":
    main()

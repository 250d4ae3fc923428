"""
Core terrain generation functionality.
"""

from .grid import Direction, Grid, Sample
from .spatial import CoastIndex, PointSet
from .pipeline import STAGES, GenerationCancelled, TerrainResult, generate_terrain
from .mesh import TerrainMesh, build_colors, build_triangles, build_vertices, to_mesh

__all__ = ['Direction', 'Grid', 'Sample', 'CoastIndex', 'PointSet',
           'STAGES', 'GenerationCancelled', 'TerrainResult', 'generate_terrain',
           'TerrainMesh', 'build_colors', 'build_triangles', 'build_vertices', 'to_mesh']

"""
Agent-based procedural island terrain generation.
"""

from .config import TerrainSettings
from .core import GenerationCancelled, Grid, TerrainResult, generate_terrain, to_mesh

__version__ = "0.1.0"

__all__ = ["TerrainSettings", "GenerationCancelled", "Grid", "TerrainResult",
           "generate_terrain", "to_mesh"]

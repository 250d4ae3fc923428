"""
Configuration modules for terrain generation.
"""

from .config import Settings, settings
from .terrain import TerrainSettings, get_terrain_settings

__all__ = ["Settings", "settings", "TerrainSettings", "get_terrain_settings"]

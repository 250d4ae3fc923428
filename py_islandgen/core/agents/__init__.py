"""
Terrain agents, in pipeline order.
"""

from .base import BaseAgent
from .coast import CoastAgent, CoastResult
from .noise import NoiseAgent
from .smoothing import SmoothingAgent
from .ridges import HillAgent, HillResult, MountainAgent, MountainResult
from .beach import BeachAgent, BeachResult
from .volcano import Volcano, VolcanoAgent, VolcanoResult
from .lava import LAVA_COLOR, LavaAgent, LavaResult

__all__ = [
    "BaseAgent",
    "CoastAgent", "CoastResult",
    "NoiseAgent",
    "SmoothingAgent",
    "MountainAgent", "MountainResult",
    "HillAgent", "HillResult",
    "BeachAgent", "BeachResult",
    "Volcano", "VolcanoAgent", "VolcanoResult",
    "LAVA_COLOR", "LavaAgent", "LavaResult",
]

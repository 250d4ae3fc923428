"""
Utility helpers: seeded randomness and logging setup.
"""

from .log_config import configure_logging
from .random import make_rng, spawn_agent_rngs

__all__ = ["configure_logging", "make_rng", "spawn_agent_rngs"]

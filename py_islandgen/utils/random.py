"""
Random number generation utilities.

Every agent draws from its own ``numpy.random.Generator``. The streams are
derived from a single run seed so that a whole generation run can be
reproduced from that seed alone. Seeds may be integers or strings.
"""

import hashlib
from typing import Dict, Iterable, Optional, Union

import numpy as np

Seed = Union[int, str]


def seed_entropy(seed: Optional[Seed]) -> Optional[int]:
    """
    Convert a user facing seed into integer entropy.

    Args:
        seed: Integer or string seed, or None for a non-reproducible run

    Returns:
        Non-negative integer suitable for ``numpy.random.SeedSequence``
    """
    if seed is None:
        return None
    if isinstance(seed, int):
        return abs(seed)
    digest = hashlib.sha256(str(seed).encode("utf-8")).digest()
    return int.from_bytes(digest[:16], "big")


def make_rng(seed: Optional[Seed] = None) -> np.random.Generator:
    """Create a generator from a seed (fresh OS entropy when seed is None)."""
    return np.random.default_rng(seed_entropy(seed))


def spawn_agent_rngs(
    seed: Optional[Seed], names: Iterable[str]
) -> Dict[str, np.random.Generator]:
    """
    Derive one independent generator per agent from a single seed.

    The streams are spawned from one ``SeedSequence`` in the order of
    ``names``, so the same seed and the same stage list always hand every
    agent the same stream.

    Args:
        seed: Run seed
        names: Stage names, one stream each

    Returns:
        Mapping of stage name to generator
    """
    names = list(names)
    root = np.random.SeedSequence(seed_entropy(seed))
    children = root.spawn(len(names))
    return {
        name: np.random.default_rng(child) for name, child in zip(names, children)
    }


def randint(rng: np.random.Generator, low: int, high: int) -> int:
    """Draw an integer in ``[low, high]`` inclusive."""
    if high <= low:
        return int(low)
    return int(rng.integers(low, high + 1))

from __future__ import annotations

import math
from typing import List, Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    def next_uniform(self) -> float:
        """Return a uniform draw in the open interval (0, 1)."""
        ...


class SeededRandomSource:
    """
    numpy-backed uniform source. Reproducible when a seed is given.
    """

    def __init__(self, seed: Optional[int] = None, *, generator: Optional[np.random.Generator] = None):
        self._rng = generator if generator is not None else np.random.default_rng(seed)

    def next_uniform(self) -> float:
        u = self._rng.random()
        while u == 0.0:
            u = self._rng.random()
        return float(u)


def standard_normal(source: RandomSource) -> float:
    """
    Box-Muller transform, one standard normal per call.
    """
    u1 = source.next_uniform()
    u2 = source.next_uniform()
    while u1 == 0.0 or u2 == 0.0:
        u1 = source.next_uniform()
        u2 = source.next_uniform()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


def spawn_sources(seed: Optional[int], count: int) -> List[SeededRandomSource]:
    children = np.random.SeedSequence(seed).spawn(count)
    return [SeededRandomSource(generator=np.random.default_rng(child)) for child in children]

"""
Per-worker random streams.

Each render worker owns exactly one RandomStream, seeded with the worker's
ordinal, and passes it explicitly to every function that draws random
numbers. Streams are never shared between threads.
"""

from __future__ import annotations
import numpy as np

from .vec3 import Vec3


class RandomStream:
    """A seeded source of uniform random numbers for a single worker."""

    __slots__ = ('seed', '_generator')

    def __init__(self, seed: int = 0):
        self.seed = seed
        self._generator = np.random.default_rng(seed)

    def random_float(self) -> float:
        """Return a uniform float in [0, 1)."""
        return float(self._generator.random())

    def in_unit_sphere(self) -> Vec3:
        """Random point in the volume of the unit sphere (rejection sampled)."""
        while True:
            p = Vec3(
                self.random_float(),
                self.random_float(),
                self.random_float()
            ) * 2.0 - 1.0
            if p.length_squared() <= 1.0:
                return p

    def on_unit_sphere(self) -> Vec3:
        """Random point on the surface of the unit sphere."""
        return self.in_unit_sphere().normalize()

    def __repr__(self) -> str:
        return f"RandomStream(seed={self.seed})"

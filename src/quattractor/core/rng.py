"""
Deterministic pseudo-random numbers.

A linear congruential generator whose sequence depends only on the seed, so
the same seed yields the same draws on every platform.
"""

import math

import numpy as np

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2147483647

# Rejection loops accept with probability >= pi/4 (sphere) or pi²/32 (S³)
_MAX_REJECTIONS = 10_000


class DeterministicRandom:
    """
    Seeded LCG: ``seed <- (seed * 1664525 + 1013904223) mod 2147483647``.

    Python integers never overflow, and the floored modulo keeps the state in
    ``[0, 2147483647)`` even for negative seeds, so ``next()`` is always in
    ``[0, 1)``.
    """

    def __init__(self, seed: int = 0):
        self._seed = int(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def get_seed(self) -> int:
        return self._seed

    def set_seed(self, seed: int) -> None:
        self._seed = int(seed)

    def next(self) -> float:
        """Advance the state and return a uniform float in [0, 1)."""
        self._seed = (self._seed * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self._seed / _MODULUS

    def next_float(self, min_value: float, max_value: float) -> float:
        return min_value + self.next() * (max_value - min_value)

    def next_int(self, max_value: int) -> int:
        """Uniform integer in [0, max_value)."""
        return int(math.floor(self.next() * max_value))

    def next_boolean(self) -> bool:
        return self.next() < 0.5

    def next_point_on_sphere(self) -> np.ndarray:
        """Uniform point on S² (Marsaglia 1972)."""
        for _ in range(_MAX_REJECTIONS):
            x1 = self.next_float(-1.0, 1.0)
            x2 = self.next_float(-1.0, 1.0)
            w = x1 * x1 + x2 * x2
            if w < 1.0:
                break
        else:
            raise AssertionError("sphere sampling failed to terminate")

        root = math.sqrt(1.0 - w)
        return np.array(
            [2.0 * x1 * root, 2.0 * x2 * root, 1.0 - 2.0 * w],
            dtype=np.float32,
        )

    def next_quaternion(self) -> np.ndarray:
        """Uniform unit quaternion on S³ by rejection from the 4-ball."""
        for _ in range(_MAX_REJECTIONS):
            sample = [self.next_float(-1.0, 1.0) for _ in range(4)]
            w = sum(c * c for c in sample)
            if 0.0 < w < 1.0:
                break
        else:
            raise AssertionError("quaternion sampling failed to terminate")

        scale = 1.0 / math.sqrt(w)
        return np.array([c * scale for c in sample], dtype=np.float32)

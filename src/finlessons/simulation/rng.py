"""
Seeded Random Source
====================

Portable linear-congruential generator used by every series generator:

    x_{n+1} = (9301 x_n + 49297) mod 233280,    u_n = x_n / 233280

The constants are small enough that every state fits in a double, so any
implementation that follows the same recurrence and the same draw order
reproduces identical series. Gaussian variates use the Box-Muller transform
on two successive uniforms, always drawing u1 before u2.
"""

import math
from typing import List

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRandom:
    """
    Deterministic uniform / Gaussian generator.

    Usage:
        >>> rng = SeededRandom(42)
        >>> u = rng.random()          # uniform in [0, 1)
        >>> z = rng.gauss()           # standard normal
    """

    def __init__(self, seed: int = 42):
        self.seed = int(seed)
        self._state = self.seed % MODULUS

    def random(self) -> float:
        """Next uniform variate in [0, 1)."""
        self._state = (self._state * MULTIPLIER + INCREMENT) % MODULUS
        return self._state / MODULUS

    def uniform(self, lo: float, hi: float) -> float:
        return lo + (hi - lo) * self.random()

    def sign(self) -> int:
        """+1 or -1 with equal odds (ties go to -1)."""
        return 1 if self.random() > 0.5 else -1

    def gauss(self) -> float:
        """Standard normal variate via Box-Muller; u1 is floored at 1/233280."""
        u1 = self.random()
        u2 = self.random()
        u1 = max(u1, 1.0 / MODULUS)
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    def randoms(self, n: int) -> List[float]:
        return [self.random() for _ in range(n)]

    def gaussians(self, n: int) -> List[float]:
        return [self.gauss() for _ in range(n)]

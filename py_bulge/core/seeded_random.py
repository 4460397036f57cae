"""
Seeded scalar pseudo-random function used for bulge placement.

A sin-based hash rather than a real generator. It is a poor
PRNG (nearby seeds give correlated values) but it is kept exactly so that a
seed always produces the same pattern.
"""

import math

SIN_SCALE = 10000.0


def frac(value: float) -> float:
    """Fractional part, floor based so negative inputs stay in [0, 1)."""
    return value - math.floor(value)


def rand(x: float) -> float:
    """Return frac(sin(x) * 10000), a deterministic value in [0, 1)."""
    return frac(math.sin(x) * SIN_SCALE)

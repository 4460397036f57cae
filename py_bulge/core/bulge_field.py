"""
Bulge field generation and the displacement it applies to grid points.

A bulge is a radial push away from a center point. Its influence falls off
with a quarter cosine from 1 at the center to 0 at the radius, so there is no
visible seam where a bulge ends. Overlapping bulges are summed, never clamped.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .seeded_random import rand

# Offsets into the seed sequence for each bulge parameter
SEED_STRIDE = 100
Y_OFFSET = 50
RADIUS_OFFSET = 25
STRENGTH_OFFSET = 75

MIN_RADIUS = 100.0
RADIUS_RANGE = 200.0
MIN_STRENGTH = 0.5
STRENGTH_RANGE = 0.5

Point = Tuple[float, float]


@dataclass(frozen=True)
class BulgeDescriptor:
    """A single bulge: center in canvas pixels, influence radius, strength."""

    x: float
    y: float
    radius: float
    strength: float

    @property
    def center(self) -> Point:
        return (self.x, self.y)


def generate_bulges(
    seed: float, count: int, width: float, height: float
) -> List[BulgeDescriptor]:
    """
    Derive ``count`` bulges from ``seed`` for a canvas of the given size.

    The result depends only on the arguments. Bulge ``i`` reads four values
    from the seeded function at ``seed + i*100`` plus a fixed offset per
    parameter.

    Args:
        seed: Pattern seed
        count: Number of bulges, must not be negative
        width: Canvas width in logical pixels
        height: Canvas height in logical pixels

    Returns:
        Bulges in generation order
    """
    if count < 0:
        raise ValueError(f"Bulge count must not be negative: {count}")

    bulges = []
    for i in range(int(count)):
        base = seed + i * SEED_STRIDE
        bulges.append(
            BulgeDescriptor(
                x=rand(base) * width,
                y=rand(base + Y_OFFSET) * height,
                radius=MIN_RADIUS + rand(base + RADIUS_OFFSET) * RADIUS_RANGE,
                strength=MIN_STRENGTH + rand(base + STRENGTH_OFFSET) * STRENGTH_RANGE,
            )
        )
    return bulges


def displace(
    point: Point, bulges: Sequence[BulgeDescriptor], global_strength: float
) -> Point:
    """Push ``point`` outward from every bulge whose radius contains it."""
    x, y = point
    dx = 0.0
    dy = 0.0

    for bulge in bulges:
        dist_x = x - bulge.x
        dist_y = y - bulge.y
        distance = math.sqrt(dist_x * dist_x + dist_y * dist_y)

        if distance < bulge.radius:
            influence = math.cos((distance / bulge.radius) * math.pi * 0.5)
            force = influence * global_strength * bulge.strength
            angle = math.atan2(dist_y, dist_x)
            dx += math.cos(angle) * force
            dy += math.sin(angle) * force

    return (x + dx, y + dy)


def displace_points(
    points: np.ndarray, bulges: Sequence[BulgeDescriptor], global_strength: float
) -> np.ndarray:
    """
    Vectorized ``displace`` over an (n, 2) array of points.

    Returns a new float64 array; the input is not modified.
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) array of points, got shape {points.shape}")

    offsets = np.zeros_like(points)

    for bulge in bulges:
        dist_x = points[:, 0] - bulge.x
        dist_y = points[:, 1] - bulge.y
        distance = np.sqrt(dist_x * dist_x + dist_y * dist_y)
        inside = distance < bulge.radius
        if not np.any(inside):
            continue

        influence = np.cos((distance[inside] / bulge.radius) * np.pi * 0.5)
        force = influence * global_strength * bulge.strength
        angle = np.arctan2(dist_y[inside], dist_x[inside])
        offsets[inside, 0] += np.cos(angle) * force
        offsets[inside, 1] += np.sin(angle) * force

    return points + offsets

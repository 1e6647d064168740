"""Deterministic Fibonacci placement on the unit sphere and a 2D spiral."""

import math
from dataclasses import dataclass
from typing import Tuple

GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))
SPIRAL_RADIUS = 0.9


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    z: float
    depth: float
    x2d: float
    y2d: float


def scatter_position(
    index: int,
    total: int,
    depth_range: Tuple[float, float] = (-1.0, 1.0),
) -> ScatterPoint:
    """Place item `index` of `total` on the unit sphere.

    Polar angle follows acos(2(i + 0.5)/N - 1) and azimuth advances by the
    golden angle, so points spread evenly without clustering at the poles.
    depth maps z from [-1, 1] into depth_range.
    """
    total = max(total, 1)
    phi = math.acos(clamp_unit(2 * (index + 0.5) / total - 1))
    theta = math.pi * (1 + math.sqrt(5)) * (index + 0.5)
    x = math.cos(theta) * math.sin(phi)
    y = math.sin(theta) * math.sin(phi)
    z = math.cos(phi)

    lo, hi = depth_range
    depth = lo + (hi - lo) * ((z + 1) / 2)

    norm = (index + 0.5) / total
    angle = GOLDEN_ANGLE * (index + 0.5)
    r2d = math.sqrt(norm) * SPIRAL_RADIUS
    return ScatterPoint(
        x=x,
        y=y,
        z=z,
        depth=depth,
        x2d=math.cos(angle) * r2d,
        y2d=math.sin(angle) * r2d,
    )


def clamp_unit(value: float) -> float:
    # Guards acos against index >= total
    return max(-1.0, min(1.0, value))

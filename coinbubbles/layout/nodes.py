"""
Bubble Node Model

A Node is the mutable simulation entity for one instrument: its display
radius, its deterministic unit-sphere coordinates and, once packed, its
on-screen 2D layout state. Nodes without layout state are not yet
renderable in 2D and are skipped by every 2D operation.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..market.instrument import Instrument


@dataclass
class Layout2DState:
    """On-screen position, velocity and wander phase of a packed node."""
    x: float
    y: float
    scale: float  # Area-coverage multiplier, distinct from radius
    vx: float = 0.0
    vy: float = 0.0
    seed: float = 0.0
    t: float = 0.0

    def copy(self) -> "Layout2DState":
        return replace(self)


@dataclass
class GrowState:
    """Pop-in animation progress for a freshly created bubble."""
    progress: float = 1.0
    speed: float = 0.0
    delay: float = 0.0
    elapsed: float = 1.0


@dataclass
class Viewport:
    """Canvas size in pixels."""
    width: float
    height: float

    def floored(self, minimum: float = 200.0) -> "Viewport":
        """Return a viewport no smaller than minimum on either axis."""
        return Viewport(max(minimum, self.width or 0.0), max(minimum, self.height or 0.0))

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass
class Node:
    """One bubble."""
    instrument: Instrument
    radius: float  # px
    size_factor: float
    x: float = 0.0  # Unit sphere
    y: float = 0.0
    z: float = 0.0
    depth: float = 0.0
    x2d: float = 0.0  # Spiral fallback in [-0.9, 0.9]
    y2d: float = 0.0
    layout: Optional[Layout2DState] = None
    grow: GrowState = field(default_factory=GrowState)

    @property
    def has_layout(self) -> bool:
        return self.layout is not None

    @property
    def scaled_radius(self) -> float:
        """Radius in px after the area-coverage scale (radius if unpacked)."""
        if self.layout is None:
            return self.radius
        return self.radius * self.layout.scale

    @property
    def grow_scale(self) -> float:
        return 0.2 + 0.8 * math.pow(min(1.0, max(0.0, self.grow.progress)), 0.85)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready snapshot for a renderer."""
        data: Dict[str, Any] = {
            "id": self.instrument.id,
            "symbol": self.instrument.symbol,
            "radius": self.radius,
            "size_factor": self.size_factor,
            "sphere": [self.x, self.y, self.z],
            "depth": self.depth,
            "spiral": [self.x2d, self.y2d],
            "grow_progress": self.grow.progress,
        }
        if self.layout is not None:
            data["layout"] = {
                "x": self.layout.x,
                "y": self.layout.y,
                "scale": self.layout.scale,
                "vx": self.layout.vx,
                "vy": self.layout.vy,
            }
        return data


def laid_out(nodes: Iterable[Node]) -> List[Node]:
    """Nodes that carry 2D layout state."""
    return [n for n in nodes if n.has_layout]


def overlap_pairs(
    nodes: List[Node],
    gap: float = 8.0,
    tolerance: float = 1e-6,
) -> List[Tuple[int, int, float]]:
    """Find pairs closer than their scaled radii plus gap.

    Returns:
        List of (index_a, index_b, shortfall) tuples where shortfall is how
        far (px) the pair is from satisfying the gap.
    """
    result = []
    for i in range(len(nodes)):
        a = nodes[i].layout
        if a is None:
            continue
        for j in range(i + 1, len(nodes)):
            b = nodes[j].layout
            if b is None:
                continue
            min_dist = nodes[i].radius * a.scale + nodes[j].radius * b.scale + gap
            dist = math.hypot(b.x - a.x, b.y - a.y)
            if dist < min_dist - tolerance:
                result.append((i, j, min_dist - dist))
    return result


def separation_ratio(nodes: List[Node], gap: float = 8.0, tolerance: float = 1e-6) -> float:
    """Fraction of laid-out pairs that satisfy the gap constraint (1.0 if < 2 nodes)."""
    count = len(laid_out(nodes))
    total_pairs = count * (count - 1) // 2
    if total_pairs == 0:
        return 1.0
    return 1.0 - len(overlap_pairs(nodes, gap, tolerance)) / total_pairs

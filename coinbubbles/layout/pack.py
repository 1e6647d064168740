"""
Pack Layout

Assigns every node an initial on-screen position and a uniform area-coverage
scale for a viewport.

The scale is derived once per batch: each node's effective scale
(base_scale + size_scale_gain * size_factor) gives a total footprint, and a
single area_scale stretches or shrinks that footprint toward a target
fraction of the viewport. Larger batches and batches whose radii are all
large aim for lower coverage so the initial scatter has room to breathe.

Positions are independent uniform samples inside the viewport; the overlap
resolver cleans up afterwards. Nodes that already carry layout state keep
their position and velocity and only have their scale recomputed.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional

from ..config import EngineConfig
from .nodes import Layout2DState, Node, Viewport
from .radius import clamp

logger = logging.getLogger(__name__)


@dataclass
class PackResult:
    """Summary of one pack pass."""
    area_scale: float
    coverage_target: float
    placed: int  # Nodes that received fresh layout state
    rescaled: int  # Nodes that kept their layout and only got a new scale


def effective_scale(node: Node, config: EngineConfig) -> float:
    return config.base_scale + node.size_factor * config.size_scale_gain


def coverage_target(count: int, avg_radius: float, config: EngineConfig) -> float:
    """Fraction of viewport area the packed bubbles should cover."""
    if count > config.medium_batch:
        base = config.coverage_large
    elif count > config.small_batch:
        base = config.coverage_medium
    else:
        base = config.coverage_small

    # Large average radius means sizes are close together; leave more room
    inflation = clamp(
        (avg_radius - config.radius_inflation_start) / config.radius_inflation_span, 0.0, 1.0
    )
    return clamp(base - inflation * config.radius_inflation_cut, config.coverage_floor, base)


def compute_2d_layout(
    nodes: List[Node],
    width: float,
    height: float,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
) -> Optional[PackResult]:
    """Pack nodes into a viewport.

    Args:
        nodes: Node batch, mutated in place
        width: Viewport width (px), floored to config.min_viewport
        height: Viewport height (px), floored to config.min_viewport
        config: Engine configuration
        rng: Random source for positions and wander phases

    Returns:
        PackResult, or None for an empty batch
    """
    if not nodes:
        return None
    config = config or EngineConfig()
    rng = rng or random.Random()
    viewport = Viewport(width, height).floored(config.min_viewport)

    ordered = sorted(nodes, key=lambda n: n.radius, reverse=True)
    count = len(ordered)
    avg_radius = sum(n.radius for n in ordered) / count

    footprint = sum(
        math.pi * (n.radius * effective_scale(n, config)) ** 2 for n in ordered
    )
    target = coverage_target(count, avg_radius, config)
    target_area = viewport.area * target
    area_scale = clamp(
        math.sqrt((target_area or 1.0) / (footprint or 1.0)),
        config.area_scale_min,
        config.area_scale_max,
    )

    placed = 0
    rescaled = 0
    margin = config.pack_margin
    for node in ordered:
        scale = effective_scale(node, config) * area_scale
        if node.has_layout:
            node.layout.scale = scale
            rescaled += 1
            continue

        r_px = node.radius * scale
        inset = margin + r_px
        x = inset + rng.random() * (viewport.width - 2 * inset)
        y = inset + rng.random() * (viewport.height - 2 * inset)
        node.layout = Layout2DState(
            x=x,
            y=y,
            scale=scale,
            vx=(rng.random() - 0.5) * 2 * config.initial_speed,
            vy=(rng.random() - 0.5) * 2 * config.initial_speed,
            seed=rng.random() * math.pi * 2,
            t=rng.random() * math.pi * 2,
        )
        placed += 1

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Packed %d nodes into %.0fx%.0f: coverage %.2f, area scale %.3f (%d new, %d kept)",
            count, viewport.width, viewport.height, target, area_scale, placed, rescaled,
        )
    return PackResult(
        area_scale=area_scale,
        coverage_target=target,
        placed=placed,
        rescaled=rescaled,
    )

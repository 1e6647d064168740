"""
Physics Stepper

Advances every laid-out node by one animation frame:

1. Integrate position from velocity
2. Bounce off the viewport edges (clamp + damped reflection)
3. Separate touching pairs and apply a soft impulse to approaching pairs
4. Damp velocity and add a smooth per-node wander plus a little jitter

Mass is not modeled; the collision impulse is equal and opposite along the
contact normal and scaled to a fraction of the closing speed. Nodes without
layout state are skipped. Clamping dt after long pauses is the caller's job
(see FrameClock); a very large dt can tunnel through the viewport edges.
"""

import math
import random
from typing import List, Optional

from ..config import EngineConfig
from ..layout.nodes import Node, Viewport
from ..layout.overlap import bounds_for, candidate_pairs, separate_pair


def bounce_off_walls(node: Node, viewport: Viewport, config: EngineConfig):
    """Clamp a node inside the viewport, reflecting and damping its velocity."""
    p = node.layout
    if p is None:
        return
    min_x, max_x, min_y, max_y = bounds_for(node, viewport, config.boundary_margin)
    damping = config.bounce_damping

    if p.x < min_x:
        p.x = min_x
        p.vx = abs(p.vx) * damping
    elif p.x > max_x:
        p.x = max_x
        p.vx = -abs(p.vx) * damping

    if p.y < min_y:
        p.y = min_y
        p.vy = abs(p.vy) * damping
    elif p.y > max_y:
        p.y = max_y
        p.vy = -abs(p.vy) * damping


def collide(a: Node, b: Node, config: EngineConfig) -> bool:
    """Separate a touching pair and exchange an impulse if they approach.

    Returns:
        True if the pair was in contact
    """
    normal = separate_pair(a, b, config)
    if normal is None:
        return False
    nx, ny = normal
    pa = a.layout
    pb = b.layout
    rel_vel = (pb.vx - pa.vx) * nx + (pb.vy - pa.vy) * ny
    if rel_vel < 0:
        impulse = -rel_vel * config.collision_response
        pa.vx -= impulse * nx
        pa.vy -= impulse * ny
        pb.vx += impulse * nx
        pb.vy += impulse * ny
    return True


def wander(node: Node, dt: float, config: EngineConfig, rng: random.Random):
    """Damp velocity and steer along the node's own smooth drift pattern."""
    p = node.layout
    if p is None:
        return
    p.t += dt
    # Damping is per frame, deliberately not scaled by dt
    p.vx *= config.velocity_damping
    p.vy *= config.velocity_damping
    p.vx += math.cos(p.seed + p.t * config.wander_freq_x) * config.wander_strength * dt
    p.vy += math.sin(p.seed + p.t * config.wander_freq_y) * config.wander_strength * dt
    p.vx += (rng.random() - 0.5) * config.jitter_strength * dt
    p.vy += (rng.random() - 0.5) * config.jitter_strength * dt


def step_physics(
    nodes: List[Node],
    width: float,
    height: float,
    dt: float,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Advance the simulation by dt seconds, mutating nodes in place.

    Args:
        nodes: Node list owned by the caller
        width: Viewport width (px), floored to config.min_viewport
        height: Viewport height (px), floored to config.min_viewport
        dt: Elapsed seconds; the caller clamps this (0.05s convention)
        config: Engine configuration
        rng: Random source for jitter

    Returns:
        Number of pairs in contact this frame
    """
    config = config or EngineConfig()
    rng = rng or random.Random()
    viewport = Viewport(width, height).floored(config.min_viewport)

    for node in nodes:
        p = node.layout
        if p is None:
            continue
        p.x += p.vx * dt
        p.y += p.vy * dt
        bounce_off_walls(node, viewport, config)

    contacts = 0
    for i, j in candidate_pairs(nodes, config):
        if collide(nodes[i], nodes[j], config):
            contacts += 1

    for node in nodes:
        wander(node, dt, config, rng)

    return contacts


def advance_grow(nodes: List[Node], dt: float):
    """Advance every node's pop-in animation by dt seconds."""
    for node in nodes:
        grow = node.grow
        grow.elapsed += dt
        active = max(0.0, grow.elapsed - grow.delay)
        grow.progress = min(1.0, active * (grow.speed or 1.0))

"""
Bubble Node Builder

The single build operation: instruments + options -> node list. Metrics
feed the radius model, the sphere scatter gives each node deterministic 3D
coordinates, and pack layout + overlap resolution give it an initial 2D
position sized to the viewport.

When the previous node list is supplied, nodes are matched by instrument id
and carry their 2D layout state and grow animation over, so bubbles keep
their on-screen identity across data refreshes.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..config import EngineConfig
from ..market.instrument import Instrument, SizeMode, Timeframe
from ..market.metrics import compute_metrics, has_price_changed
from .nodes import GrowState, Node
from .overlap import resolve_initial_overlaps
from .pack import compute_2d_layout
from .radius import compute_radii, size_factor
from .scatter import scatter_position

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """Options for building a node batch."""
    timeframe: Union[Timeframe, str] = Timeframe.DAY
    size_mode: Union[SizeMode, str] = SizeMode.CAP
    width: float = 0.0  # Floored to config.min_viewport
    height: float = 0.0
    depth_range: Tuple[float, float] = (-1.0, 1.0)


def fresh_grow(rng: random.Random, config: EngineConfig) -> GrowState:
    return GrowState(
        progress=0.0,
        speed=config.grow_speed_min + rng.random() * config.grow_speed_range,
        delay=rng.random() * config.grow_delay_max,
        elapsed=0.0,
    )


def build_bubble_nodes(
    instruments: Sequence[Instrument],
    options: Optional[BuildOptions] = None,
    previous: Optional[Sequence[Node]] = None,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
) -> List[Node]:
    """Build one node per instrument, in input order.

    Args:
        instruments: Ordered instrument batch (empty gives an empty list)
        options: Timeframe, size mode, viewport and depth range
        previous: Node list from the previous build; matching instrument
                  ids keep their layout state (only scale is recomputed)
        config: Engine configuration
        rng: Random source for fresh positions and grow timings

    Returns:
        List of nodes with 2D layout state populated
    """
    if not instruments:
        return []
    options = options or BuildOptions()
    config = config or EngineConfig()
    rng = rng or random.Random()

    timeframe = Timeframe.parse(options.timeframe)
    size_mode = SizeMode.parse(options.size_mode)
    metrics = compute_metrics(instruments, timeframe)
    radii = compute_radii(metrics, size_mode, config)

    total = len(instruments)
    nodes = []
    for index, (inst, radius) in enumerate(zip(instruments, radii)):
        point = scatter_position(index, total, options.depth_range)
        nodes.append(Node(
            instrument=inst,
            radius=radius,
            size_factor=size_factor(radius, config),
            x=point.x,
            y=point.y,
            z=point.z,
            depth=point.depth,
            x2d=point.x2d,
            y2d=point.y2d,
        ))

    existing: Dict[str, Node] = {}
    if previous:
        existing = {n.instrument.id: n for n in previous}
    changed = []
    for index, node in enumerate(nodes):
        # A repeated id in the batch is placed fresh rather than stacked.
        old = existing.pop(node.instrument.id, None)
        if old is not None and old.has_layout:
            node.layout = old.layout.copy()
        if old is None or has_price_changed(old.instrument, node.instrument):
            changed.append(index)
        else:
            node.grow = replace(old.grow)

    result = compute_2d_layout(nodes, options.width, options.height, config, rng)
    if result is not None and result.placed:
        resolve_initial_overlaps(nodes, options.width, options.height, config)

    for index in changed:
        nodes[index].grow = fresh_grow(rng, config)

    logger.debug(
        "Built %d nodes (mode=%s, timeframe=%s, %d carried over)",
        len(nodes), size_mode.value, timeframe.value,
        result.rescaled if result is not None else 0,
    )
    return nodes

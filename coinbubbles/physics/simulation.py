"""
Bubble Simulation Driver

Host-side owner of a node list. A renderer calls rebuild() whenever the
instrument batch, sizing mode or viewport changes and tick() once per
animation frame; the driver keeps the frame clock, the random source and
the rebuild continuity in one place.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Union

from ..config import EngineConfig
from ..layout.builder import BuildOptions, build_bubble_nodes
from ..layout.nodes import Node, separation_ratio
from ..market.instrument import Instrument, SizeMode, Timeframe
from .clock import FrameClock
from .stepper import advance_grow, step_physics

logger = logging.getLogger(__name__)


class BubbleSimulation:
    """Owns a bubble node list and drives it frame by frame."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        seed: Optional[int] = None,
    ):
        self.config = config or EngineConfig()
        self.rng = random.Random(seed)
        self.clock = FrameClock(self.config.max_frame_dt)
        self.nodes: List[Node] = []
        self.options = BuildOptions()
        self.frames = 0

    @property
    def width(self) -> float:
        return max(self.config.min_viewport, self.options.width)

    @property
    def height(self) -> float:
        return max(self.config.min_viewport, self.options.height)

    def rebuild(
        self,
        instruments: Sequence[Instrument],
        timeframe: Union[Timeframe, str] = Timeframe.DAY,
        size_mode: Union[SizeMode, str] = SizeMode.CAP,
        width: Optional[float] = None,
        height: Optional[float] = None,
        reuse_existing: bool = False,
    ) -> List[Node]:
        """Replace the node set for a new batch.

        Args:
            instruments: New instrument batch
            timeframe: Percent-change window
            size_mode: Radius metric
            width: Viewport width, defaults to the current one
            height: Viewport height, defaults to the current one
            reuse_existing: Carry layout state over from the current nodes
                            (data refresh) instead of re-scattering

        Returns:
            The new node list
        """
        self.options = BuildOptions(
            timeframe=Timeframe.parse(timeframe),
            size_mode=SizeMode.parse(size_mode),
            width=self.options.width if width is None else width,
            height=self.options.height if height is None else height,
        )
        previous = self.nodes if reuse_existing else None
        self.nodes = build_bubble_nodes(
            instruments, self.options, previous=previous, config=self.config, rng=self.rng
        )
        self.clock.reset()
        logger.info(
            "Rebuilt %d bubbles (%s, %s) in %.0fx%.0f",
            len(self.nodes), self.options.size_mode.value, self.options.timeframe.value,
            self.width, self.height,
        )
        return self.nodes

    def resize(self, width: float, height: float) -> List[Node]:
        """Repack the current batch for a new viewport, keeping positions."""
        instruments = [n.instrument for n in self.nodes]
        return self.rebuild(
            instruments,
            self.options.timeframe,
            self.options.size_mode,
            width=width,
            height=height,
            reuse_existing=True,
        )

    def advance(self, dt: float) -> int:
        """Step physics and grow animation by an already clamped dt."""
        contacts = step_physics(
            self.nodes, self.width, self.height, dt, config=self.config, rng=self.rng
        )
        advance_grow(self.nodes, dt)
        self.frames += 1
        return contacts

    def tick(self, timestamp: float) -> float:
        """Advance one animation frame from a monotonic timestamp (seconds).

        Returns:
            The dt actually simulated
        """
        dt = self.clock.tick(timestamp)
        self.advance(dt)
        return dt

    def run(self, frames: int, dt: float) -> int:
        """Advance a fixed number of frames (headless use).

        Returns:
            Contacts seen in the last frame
        """
        dt = min(dt, self.config.max_frame_dt)
        contacts = 0
        for _ in range(frames):
            contacts = self.advance(dt)
        return contacts

    def separation(self, tolerance: float = 1e-6) -> float:
        return separation_ratio(self.nodes, self.config.collision_gap, tolerance)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready state for a renderer."""
        return {
            "width": self.width,
            "height": self.height,
            "timeframe": self.options.timeframe.value,
            "size_mode": self.options.size_mode.value,
            "frames": self.frames,
            "nodes": [n.to_dict() for n in self.nodes],
        }

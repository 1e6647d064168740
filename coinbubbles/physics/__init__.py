"""Per-frame bubble physics and the host-side simulation driver."""

from .stepper import advance_grow, step_physics
from .clock import FrameClock
from .simulation import BubbleSimulation

__all__ = [
    "advance_grow",
    "step_physics",
    "FrameClock",
    "BubbleSimulation",
]

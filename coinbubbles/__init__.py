"""
CoinBubbles - Bubble layout and physics for market instruments

Sizes ranked instruments as bubbles by market cap, volume or percent change,
packs them into a viewport without overlap and animates them with a light
collision-aware drift simulation.
"""

__version__ = "0.1.0"

from .config import EngineConfig, load_config
from .market.instrument import Instrument, SizeMode, Timeframe
from .layout.builder import BuildOptions, build_bubble_nodes
from .layout.nodes import Node, Layout2DState
from .physics.stepper import step_physics
from .physics.simulation import BubbleSimulation

__all__ = [
    "EngineConfig",
    "load_config",
    "Instrument",
    "SizeMode",
    "Timeframe",
    "BuildOptions",
    "build_bubble_nodes",
    "Node",
    "Layout2DState",
    "step_physics",
    "BubbleSimulation",
]

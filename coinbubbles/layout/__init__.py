"""Bubble layout: radius model, scatter, pack layout and overlap resolution."""

from .nodes import (
    GrowState,
    Layout2DState,
    Node,
    Viewport,
    overlap_pairs,
    separation_ratio,
)
from .radius import compute_radii, percent_radii, ranked_radii, size_factor
from .scatter import ScatterPoint, scatter_position
from .pack import PackResult, compute_2d_layout
from .overlap import resolve_initial_overlaps, separate_pair
from .builder import BuildOptions, build_bubble_nodes

__all__ = [
    "GrowState",
    "Layout2DState",
    "Node",
    "Viewport",
    "overlap_pairs",
    "separation_ratio",
    "compute_radii",
    "percent_radii",
    "ranked_radii",
    "size_factor",
    "ScatterPoint",
    "scatter_position",
    "PackResult",
    "compute_2d_layout",
    "resolve_initial_overlaps",
    "separate_pair",
    "BuildOptions",
    "build_bubble_nodes",
]

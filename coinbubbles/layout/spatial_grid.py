"""
Spatial Grid Broad Phase

Optional replacement for the all-pairs loop when batches grow large.
Instead of checking all N*(N-1)/2 node pairs (O(N²)), nodes are binned into
square cells and only pairs in the same or adjacent cells are returned.

Cell size is the largest possible contact distance (two of the largest
scaled radii plus the gap), so any two nodes that could touch are in the
same cell or adjacent cells.
"""

import math
from typing import Dict, List, Sequence, Tuple

from .nodes import Node


class NodeSpatialGrid:
    """Bins laid-out nodes by index for neighbour lookups."""

    def __init__(self, cell_size: float):
        """Initialize spatial grid.

        Args:
            cell_size: Size of each grid cell in px (must be > 0)
        """
        self.cell_size = max(cell_size, 1.0)
        self._cells: Dict[Tuple[int, int], List[int]] = {}
        self._keys: Dict[int, Tuple[int, int]] = {}

    def _cell_key(self, x: float, y: float) -> Tuple[int, int]:
        """Convert canvas coordinates to cell key."""
        return (int(math.floor(x / self.cell_size)),
                int(math.floor(y / self.cell_size)))

    def insert(self, index: int, x: float, y: float):
        """Insert a node index into the grid."""
        cell = self._cell_key(x, y)
        self._cells.setdefault(cell, []).append(index)
        self._keys[index] = cell

    def get_neighbors(self, index: int) -> List[int]:
        """Indices in the 3x3 neighbourhood that are greater than `index`.

        Only returning greater indices yields each unordered pair once.
        """
        cell = self._keys.get(index)
        if cell is None:
            return []
        cx, cy = cell
        neighbors = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for other in self._cells.get((cx + dx, cy + dy), ()):
                    if other > index:
                        neighbors.append(other)
        return neighbors


def contact_distance(nodes: Sequence[Node], gap: float) -> float:
    """Largest center distance at which two laid-out nodes can collide."""
    largest = max((n.scaled_radius for n in nodes if n.has_layout), default=0.0)
    return 2 * largest + gap


def grid_pairs(nodes: Sequence[Node], gap: float) -> List[Tuple[int, int]]:
    """Candidate pairs from a grid built over the current positions.

    Pairs come back sorted so the narrow phase visits them in the same order
    the all-pairs loop would.
    """
    grid = NodeSpatialGrid(contact_distance(nodes, gap) + 0.1)
    for i, node in enumerate(nodes):
        if node.has_layout:
            grid.insert(i, node.layout.x, node.layout.y)

    pairs = []
    for i, node in enumerate(nodes):
        if node.layout is None:
            continue
        for j in grid.get_neighbors(i):
            pairs.append((i, j))
    pairs.sort()
    return pairs

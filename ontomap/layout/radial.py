"""Radial mind-map strategy: BFS levels on concentric circles around the root."""

import math
from collections import deque

from ontomap.graph import ConceptGraph
from ontomap.layout.common import Positions, find_root

CENTER_X = 800
CENTER_Y = 600
RING_SPACING = 250


def bfs_levels(graph: ConceptGraph, root_id: str) -> dict[str, int]:
    """Shortest hop count from the root via outbound edges; first visit wins."""
    levels = {root_id: 0}
    queue = deque([root_id])
    while queue:
        current = queue.popleft()
        for child in graph.children(current):
            if child.id not in levels:
                levels[child.id] = levels[current] + 1
                queue.append(child.id)
    return levels


def layout_radial(graph: ConceptGraph) -> Positions:
    """Place level i on a circle of radius i * 250, evenly spaced from angle 0.

    Nodes unreachable from the root are left out and keep their position.
    """
    root = find_root(graph)
    if root is None:
        return {}

    levels = bfs_levels(graph, root.id)
    positions: Positions = {root.id: (CENTER_X, CENTER_Y)}

    rings: dict[int, list[str]] = {}
    for node in graph.nodes:
        level = levels.get(node.id)
        if level:
            rings.setdefault(level, []).append(node.id)

    for level, ring in sorted(rings.items()):
        radius = level * RING_SPACING
        step = 2 * math.pi / len(ring)
        for idx, node_id in enumerate(ring):
            angle = idx * step
            positions[node_id] = (
                CENTER_X + radius * math.cos(angle),
                CENTER_Y + radius * math.sin(angle),
            )
    return positions

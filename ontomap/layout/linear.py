"""Timeline and fishbone strategies — concepts strung along a horizontal axis.

Both only guarantee a readable picture for shallow trees: timeline for chains,
fishbone for bones with one level of sub-items. Deeper nodes are best-effort.
"""

import math

from ontomap.graph import ConceptGraph
from ontomap.layout.common import Positions, find_root

START_X = 100
BASELINE_Y = 400
STEP_X = 280
TIMELINE_OFFSET_Y = 120
RIB_OFFSET_X = -50
RIB_STEP_Y = 100


def layout_timeline(graph: ConceptGraph) -> Positions:
    """Depth-first pre-order; each visit advances x, depth parity picks above/below."""
    root = find_root(graph)
    if root is None:
        return {}

    positions: Positions = {}
    x = START_X
    stack: list[tuple[str, int]] = [(root.id, 0)]
    while stack:
        node_id, depth = stack.pop()
        if node_id in positions:
            continue
        if depth == 0:
            y = BASELINE_Y
        elif depth % 2 == 0:
            y = BASELINE_Y - TIMELINE_OFFSET_Y
        else:
            y = BASELINE_Y + TIMELINE_OFFSET_Y
        positions[node_id] = (x, y)
        x += STEP_X
        for child in reversed(graph.children(node_id)):
            if child.id not in positions:
                stack.append((child.id, depth + 1))
    return positions


def rib_offset(index: int) -> int:
    """Vertical offset of the index-th sub-item: -100, +100, -200, +200, ..."""
    sign = -1 if index % 2 == 0 else 1
    return sign * RIB_STEP_Y * math.ceil((index + 1) / 2)


def layout_fishbone(graph: ConceptGraph) -> Positions:
    """Root at the spine start, bones along the spine, sub-items fanned around each bone."""
    root = find_root(graph)
    if root is None:
        return {}

    positions: Positions = {root.id: (START_X, BASELINE_Y)}
    bone_x = START_X
    for bone in graph.children(root.id):
        if bone.id in positions:
            continue
        bone_x += STEP_X
        positions[bone.id] = (bone_x, BASELINE_Y)

        j = 0
        for item in graph.children(bone.id):
            if item.id in positions:
                continue
            positions[item.id] = (bone_x + RIB_OFFSET_X, BASELINE_Y + rib_offset(j))
            j += 1
    return positions

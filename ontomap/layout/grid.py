"""Grid strategy for MATRIX and TREETABLE. Ignores edges."""

import math

from ontomap.graph import ConceptGraph
from ontomap.layout.common import Positions

ORIGIN_X = 100
ORIGIN_Y = 100
CELL_WIDTH = 250
CELL_HEIGHT = 150


def grid_columns(count: int) -> int:
    return math.ceil(math.sqrt(count)) if count else 0


def layout_grid(graph: ConceptGraph) -> Positions:
    nodes = graph.nodes
    columns = grid_columns(len(nodes))
    positions: Positions = {}
    for i, node in enumerate(nodes):
        col = i % columns
        row = i // columns
        positions[node.id] = (ORIGIN_X + col * CELL_WIDTH, ORIGIN_Y + row * CELL_HEIGHT)
    return positions

"""Pure functions from (graph, mode) to node positions."""

from ontomap.layout.common import Positions, find_root
from ontomap.layout.engine import STRATEGY_NAMES, compute_layout, edge_router

__all__ = ["Positions", "STRATEGY_NAMES", "compute_layout", "edge_router", "find_root"]

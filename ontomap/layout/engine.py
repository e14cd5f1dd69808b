"""Map each layout mode to its strategy and edge router."""

import logging
from typing import Callable

from ontomap.graph import ConceptGraph
from ontomap.layout.common import Positions
from ontomap.layout.grid import layout_grid
from ontomap.layout.layered import layout_layered
from ontomap.layout.linear import layout_fishbone, layout_timeline
from ontomap.layout.radial import layout_radial
from ontomap.models import LayoutMode, RankDirection

logger = logging.getLogger(__name__)

Strategy = Callable[[ConceptGraph], Positions]

STRATEGIES: dict[LayoutMode, Strategy] = {
    LayoutMode.MINDMAP: layout_radial,
    LayoutMode.LOGIC: lambda g: layout_layered(g, RankDirection.LR),
    LayoutMode.BRACE: lambda g: layout_layered(g, RankDirection.LR),
    LayoutMode.ORG: lambda g: layout_layered(g, RankDirection.TB),
    LayoutMode.TREE: lambda g: layout_layered(g, RankDirection.TB),
    LayoutMode.TIMELINE: layout_timeline,
    LayoutMode.FISHBONE: layout_fishbone,
    LayoutMode.TREETABLE: layout_grid,
    LayoutMode.MATRIX: layout_grid,
}

ROUTERS: dict[LayoutMode, str] = {
    LayoutMode.TIMELINE: "metro",
    LayoutMode.FISHBONE: "normal",
    LayoutMode.TREE: "normal",
}
DEFAULT_ROUTER = "manhattan"

STRATEGY_NAMES: dict[LayoutMode, str] = {
    LayoutMode.MINDMAP: "radial",
    LayoutMode.LOGIC: "layered LR",
    LayoutMode.BRACE: "layered LR",
    LayoutMode.ORG: "layered TB",
    LayoutMode.TREE: "layered TB",
    LayoutMode.TIMELINE: "timeline",
    LayoutMode.FISHBONE: "fishbone",
    LayoutMode.TREETABLE: "grid",
    LayoutMode.MATRIX: "grid",
}


def _resolve(mode: LayoutMode | RankDirection | str) -> LayoutMode | RankDirection:
    if isinstance(mode, (LayoutMode, RankDirection)):
        return mode
    key = str(mode).upper()
    if key in LayoutMode.__members__:
        return LayoutMode(key)
    if key in RankDirection.__members__:
        return RankDirection(key)
    logger.debug("Unknown layout mode %r, using LR", mode)
    return RankDirection.LR


def compute_layout(graph: ConceptGraph, mode: LayoutMode | RankDirection | str) -> Positions:
    """New positions keyed by node id. Does not touch the graph."""
    if len(graph) == 0:
        return {}
    resolved = _resolve(mode)
    if isinstance(resolved, RankDirection):
        return layout_layered(graph, resolved)
    return STRATEGIES[resolved](graph)


def edge_router(mode: LayoutMode | RankDirection | str) -> str:
    """Edge routing style that accompanies a mode (cosmetic, for the rendering surface)."""
    resolved = _resolve(mode)
    if isinstance(resolved, LayoutMode):
        return ROUTERS.get(resolved, DEFAULT_ROUTER)
    return DEFAULT_ROUTER

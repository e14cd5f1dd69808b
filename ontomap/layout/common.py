"""Helpers shared by the layout strategies."""

from ontomap.graph import ConceptGraph
from ontomap.models import ConceptNode

Positions = dict[str, tuple[float, float]]


def find_root(graph: ConceptGraph) -> ConceptNode | None:
    """First node without inbound edges; any node if every node has one; None if empty."""
    nodes = graph.nodes
    if not nodes:
        return None
    for node in nodes:
        if graph.in_degree(node.id) == 0:
            return node
    return nodes[0]

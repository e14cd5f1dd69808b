"""In-memory concept graph with hierarchical numbering."""

import logging
import math
import uuid

from ontomap.models import ConceptEdge, ConceptNode, GraphSnapshot

logger = logging.getLogger(__name__)

# Node box geometry, shared with renderers
NODE_WIDTH = 220
NODE_BASE_HEIGHT = 60
NODE_LINE_HEIGHT = 16
NODE_CHARS_PER_LINE = 28

ROOT_NUMBER = "0"


def node_size(label: str) -> tuple[int, int]:
    """Box size for a label: fixed width, one extra text line per 28 chars past two lines."""
    lines = math.ceil(len(label) / NODE_CHARS_PER_LINE)
    extra_lines = max(0, lines - 2)
    return NODE_WIDTH, NODE_BASE_HEIGHT + extra_lines * NODE_LINE_HEIGHT


def next_numbers(parent_number: str, existing_children: int, count: int) -> list[str]:
    """Hierarchical numbers for `count` new children appended after `existing_children`.

    Children of the root ("0") get plain integers, children of a numbered node get
    dotted paths, children of an unnumbered node stay unnumbered.
    """
    start = existing_children + 1
    numbers: list[str] = []
    for i in range(count):
        if parent_number == ROOT_NUMBER:
            numbers.append(f"{start + i}")
        elif parent_number:
            numbers.append(f"{parent_number}.{start + i}")
        else:
            numbers.append("")
    return numbers


class ConceptGraph:
    """Mutable directed graph of concepts for one mission.

    Nodes and edges keep insertion order; layout strategies and `children()`
    rely on it. Structural no-ops (unknown ids, duplicate edges) never raise.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, ConceptNode] = {}
        self._edges: list[ConceptEdge] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"ConceptGraph({len(self._nodes)} nodes, {len(self._edges)} edges)"

    @property
    def nodes(self) -> list[ConceptNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[ConceptEdge]:
        return list(self._edges)

    def get(self, node_id: str) -> ConceptNode | None:
        return self._nodes.get(node_id)

    def exists(self, node_id: str) -> bool:
        return node_id in self._nodes

    # --- Mutation ---

    def add_node(
        self,
        label: str,
        x: float = 0.0,
        y: float = 0.0,
        number: str = "",
        node_id: str | None = None,
    ) -> str:
        node_id = node_id or uuid.uuid4().hex
        self._nodes[node_id] = ConceptNode(id=node_id, label=label, number=number, x=x, y=y)
        return node_id

    def remove_node(self, node_id: str) -> None:
        if node_id not in self._nodes:
            return
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]
        del self._nodes[node_id]

    def add_edge(self, source: str, target: str) -> None:
        if source not in self._nodes or target not in self._nodes:
            logger.debug("Ignoring edge %s -> %s: missing endpoint", source, target)
            return
        edge = ConceptEdge(source=source, target=target)
        if edge in self._edges:
            return
        self._edges.append(edge)

    def remove_descendants(self, node_id: str) -> None:
        """Remove everything reachable from `node_id` via outbound edges, keeping the node."""
        if node_id not in self._nodes:
            return
        visited = {node_id}
        self._remove_subtree(node_id, visited)

    def _remove_subtree(self, node_id: str, visited: set[str]) -> None:
        # Child ids are captured before any removal below
        child_ids = [c.id for c in self.children(node_id)]
        for child_id in child_ids:
            if child_id in visited:
                continue
            visited.add(child_id)
            self._remove_subtree(child_id, visited)
            self.remove_node(child_id)

    def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()

    def set_position(self, node_id: str, x: float, y: float) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.x = x
            node.y = y

    def apply_positions(self, positions: dict[str, tuple[float, float]]) -> None:
        for node_id, (x, y) in positions.items():
            self.set_position(node_id, x, y)

    # --- Queries ---

    def children(self, node_id: str) -> list[ConceptNode]:
        """Targets of outbound edges, in edge-insertion order."""
        return [self._nodes[e.target] for e in self._edges if e.source == node_id]

    def parents(self, node_id: str) -> list[ConceptNode]:
        return [self._nodes[e.source] for e in self._edges if e.target == node_id]

    def in_degree(self, node_id: str) -> int:
        return sum(1 for e in self._edges if e.target == node_id)

    def ancestors(self, node_id: str) -> set[str]:
        """Every node that reaches `node_id` through inbound edges."""
        found: set[str] = set()
        stack = [node_id]
        while stack:
            current = stack.pop()
            for parent in self.parents(current):
                if parent.id not in found and parent.id != node_id:
                    found.add(parent.id)
                    stack.append(parent.id)
        return found

    def neighbors(self, node_id: str) -> set[str]:
        """Closed neighborhood: `node_id` plus everything one edge away in either direction."""
        if node_id not in self._nodes:
            return set()
        result = {node_id}
        for e in self._edges:
            if e.source == node_id:
                result.add(e.target)
            elif e.target == node_id:
                result.add(e.source)
        return result

    def incident_edges(self, node_id: str) -> list[ConceptEdge]:
        return [e for e in self._edges if e.source == node_id or e.target == node_id]

    # --- Snapshots ---

    def serialize(self) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=[n.model_copy() for n in self._nodes.values()],
            edges=list(self._edges),
        )

    def deserialize(self, snapshot: GraphSnapshot) -> None:
        """Replace the graph contents with `snapshot`, keeping ids and order."""
        self.clear()
        for node in snapshot.nodes:
            self._nodes[node.id] = node.model_copy()
        for edge in snapshot.edges:
            self.add_edge(edge.source, edge.target)

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> "ConceptGraph":
        graph = cls()
        graph.deserialize(snapshot)
        return graph

"""Layered strategy — rank-based placement for flow, org and tree charts.

Phases:
  1. Cycle removal (DFS back edges reversed, self loops dropped)
  2. Rank assignment (longest path from a source)
  3. Crossing minimization (barycenter sweeps, best ordering kept)
  4. Coordinate assignment (ranks along one axis, rank members along the other)

Positions are top-left corners of the node boxes from `node_size`.
"""

from __future__ import annotations

import networkx as nx

from ontomap.graph import ConceptGraph, node_size
from ontomap.layout.common import Positions
from ontomap.models import RankDirection

MARGIN_X = 100
MARGIN_Y = 100
NODE_SEP = 100
RANK_SEP = 150
SWEEPS = 4


# ─── Cycle removal ────────────────────────────────────────────────────────────


def build_dag(graph: ConceptGraph) -> tuple[nx.DiGraph, set[tuple[str, str]]]:
    """Copy the concept graph into a DiGraph and reverse its back edges.

    Returns the DAG and the set of (source, target) edges that were reversed,
    relative to the original direction.
    """
    dag: nx.DiGraph = nx.DiGraph()
    for node in graph.nodes:
        dag.add_node(node.id, size=node_size(node.label))
    for edge in graph.edges:
        if edge.source != edge.target:
            dag.add_edge(edge.source, edge.target)

    back_edges = _find_back_edges(dag)
    for src, tgt in back_edges:
        dag.remove_edge(src, tgt)
        if not dag.has_edge(tgt, src):
            dag.add_edge(tgt, src)
    return dag, back_edges


def _find_back_edges(dag: nx.DiGraph) -> set[tuple[str, str]]:
    """Iterative DFS from sources first; an edge into a node still on the stack is a back edge."""
    on_stack, done = 1, 2
    state: dict[str, int] = {}
    back_edges: set[tuple[str, str]] = set()

    starts = [n for n in dag.nodes if dag.in_degree(n) == 0] + list(dag.nodes)
    for start in starts:
        if start in state:
            continue
        state[start] = on_stack
        stack = [(start, iter(list(dag.successors(start))))]
        while stack:
            node, successors = stack[-1]
            child = next(successors, None)
            if child is None:
                state[node] = done
                stack.pop()
            elif child not in state:
                state[child] = on_stack
                stack.append((child, iter(list(dag.successors(child)))))
            elif state[child] == on_stack:
                back_edges.add((node, child))
    return back_edges


# ─── Rank assignment ──────────────────────────────────────────────────────────


def assign_ranks(dag: nx.DiGraph) -> dict[str, int]:
    """Longest path from any source: a node sits one rank past its deepest predecessor."""
    ranks: dict[str, int] = {}
    for node in nx.topological_sort(dag):
        ranks[node] = max((ranks[p] + 1 for p in dag.predecessors(node)), default=0)
    return ranks


def group_layers(dag: nx.DiGraph, ranks: dict[str, int]) -> list[list[str]]:
    """Nodes per rank in graph insertion order."""
    if not ranks:
        return []
    layers: list[list[str]] = [[] for _ in range(max(ranks.values()) + 1)]
    for node in dag.nodes:
        layers[ranks[node]].append(node)
    return layers


# ─── Crossing minimization ────────────────────────────────────────────────────


def count_crossings(dag: nx.DiGraph, layers: list[list[str]]) -> int:
    """Crossings between edges joining adjacent ranks."""
    index = {n: i for layer in layers for i, n in enumerate(layer)}
    total = 0
    for upper, lower in zip(layers, layers[1:]):
        lower_set = set(lower)
        segments = [
            (index[u], index[v])
            for u in upper
            for v in dag.successors(u)
            if v in lower_set
        ]
        for i, (a1, b1) in enumerate(segments):
            for a2, b2 in segments[i + 1:]:
                if (a1 - a2) * (b1 - b2) < 0:
                    total += 1
    return total


def _reorder(layer: list[str], neighbors_of, index: dict[str, int]) -> list[str]:
    def barycenter(node: str) -> float:
        placed = [index[n] for n in neighbors_of(node) if n in index]
        if not placed:
            return float(index[node])
        return sum(placed) / len(placed)

    return sorted(layer, key=lambda n: (barycenter(n), index[n]))


def minimize_crossings(dag: nx.DiGraph, layers: list[list[str]]) -> list[list[str]]:
    """Alternate downward and upward barycenter sweeps; return the best ordering seen."""
    current = [list(layer) for layer in layers]
    best = [list(layer) for layer in current]
    best_crossings = count_crossings(dag, best)

    for sweep in range(SWEEPS):
        if best_crossings == 0:
            break
        downward = sweep % 2 == 0
        order = range(1, len(current)) if downward else range(len(current) - 2, -1, -1)
        neighbors_of = dag.predecessors if downward else dag.successors
        for r in order:
            index = {n: i for layer in current for i, n in enumerate(layer)}
            current[r] = _reorder(current[r], neighbors_of, index)

        crossings = count_crossings(dag, current)
        if crossings < best_crossings:
            best = [list(layer) for layer in current]
            best_crossings = crossings
    return best


# ─── Coordinate assignment ────────────────────────────────────────────────────


def assign_coordinates(
    dag: nx.DiGraph,
    layers: list[list[str]],
    direction: RankDirection,
) -> Positions:
    horizontal = direction in (RankDirection.LR, RankDirection.RL)
    mirrored = direction in (RankDirection.RL, RankDirection.BT)

    def depth(node: str) -> float:
        width, height = dag.nodes[node]["size"]
        return width if horizontal else height

    def breadth(node: str) -> float:
        width, height = dag.nodes[node]["size"]
        return height if horizontal else width

    layer_depths = [max(depth(n) for n in layer) for layer in layers]
    layer_breadths = [
        sum(breadth(n) for n in layer) + NODE_SEP * (len(layer) - 1) for layer in layers
    ]
    total_depth = sum(layer_depths) + RANK_SEP * (len(layers) - 1)
    max_breadth = max(layer_breadths)

    positions: Positions = {}
    rank_offset = 0.0
    for layer, layer_depth, layer_breadth in zip(layers, layer_depths, layer_breadths):
        along = (max_breadth - layer_breadth) / 2
        for node in layer:
            across = rank_offset + (layer_depth - depth(node)) / 2
            if mirrored:
                across = total_depth - across - depth(node)
            if horizontal:
                positions[node] = (MARGIN_X + across, MARGIN_Y + along)
            else:
                positions[node] = (MARGIN_X + along, MARGIN_Y + across)
            along += breadth(node) + NODE_SEP
        rank_offset += layer_depth + RANK_SEP
    return positions


def layout_layered(
    graph: ConceptGraph, direction: RankDirection = RankDirection.LR
) -> Positions:
    if len(graph) == 0:
        return {}
    dag, _ = build_dag(graph)
    ranks = assign_ranks(dag)
    layers = minimize_crossings(dag, group_layers(dag, ranks))
    return assign_coordinates(dag, layers, direction)

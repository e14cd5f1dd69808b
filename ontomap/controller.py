"""Interaction controller — hover, selection, expand/retract/promote and pan/zoom."""

import logging
import uuid

from ontomap.ai_client import DETAIL_UNAVAILABLE, AIClient, build_ai_client
from ontomap.config import Config
from ontomap.errors import OntomapError
from ontomap.graph import ROOT_NUMBER, ConceptGraph, next_numbers
from ontomap.missions import ROOT_X, ROOT_Y, MissionManager
from ontomap.models import ConceptNode, GraphSnapshot, InteractionState, Tab
from ontomap.surface import RenderSurface
from ontomap.viewport import Viewport

logger = logging.getLogger(__name__)

LIT_OPACITY = 1.0
DIM_NODE_OPACITY = 0.4
DIM_EDGE_OPACITY = 0.2
DETAIL_LOADING = "Analyzing concept..."
EXPAND_FAILED = "Failed to expand node"


class InteractionController:
    """Session state over the live graph of a `MissionManager`.

    Expand and hover fetches are coroutines that may resolve after the graph or
    the hover target has changed; both re-check before applying anything.
    """

    def __init__(self, missions: MissionManager, ai: AIClient) -> None:
        self.missions = missions
        self.ai = ai
        self.viewport = Viewport()
        self.hovered_id: str | None = None
        self.hovered_label: str | None = None
        self.detail: str | None = None
        self.selected_id: str | None = None

    @property
    def graph(self) -> ConceptGraph:
        return self.missions.graph

    @property
    def surface(self) -> RenderSurface:
        return self.missions.surface

    @property
    def state(self) -> InteractionState:
        if self.selected_id is not None:
            return InteractionState.SELECTED
        if self.hovered_id is not None:
            return InteractionState.HOVERING
        return InteractionState.IDLE

    # --- Hover ---

    async def hover(self, node_id: str) -> str | None:
        """Highlight the node's neighborhood and fetch its details.

        Returns the detail text if it was applied, None if the hover moved on
        to a different label before the fetch resolved.
        """
        node = self.graph.get(node_id)
        if node is None:
            return None

        self.hovered_id = node_id
        self.hovered_label = node.label
        self._highlight(node_id)
        self.detail = DETAIL_LOADING
        self.surface.show_detail(node.label, DETAIL_LOADING)

        label = node.label
        try:
            text = await self.ai.describe(label)
        except OntomapError as e:
            logger.warning("Detail fetch failed for %r: %s", label, e)
            text = DETAIL_UNAVAILABLE

        if self.hovered_label != label:
            logger.debug("Dropping stale details for %r", label)
            return None
        self.detail = text
        self.surface.show_detail(label, text)
        return text

    def leave(self) -> None:
        self.surface.reset_highlight()
        self.surface.hide_detail()
        self.hovered_id = None
        self.hovered_label = None
        self.detail = None

    def _highlight(self, node_id: str) -> None:
        lit = self.graph.neighbors(node_id)
        incident = {(e.source, e.target) for e in self.graph.incident_edges(node_id)}
        node_opacity = {
            n.id: LIT_OPACITY if n.id in lit else DIM_NODE_OPACITY for n in self.graph.nodes
        }
        edge_opacity = {
            (e.source, e.target): LIT_OPACITY if (e.source, e.target) in incident else DIM_EDGE_OPACITY
            for e in self.graph.edges
        }
        self.surface.highlight(node_opacity, edge_opacity)

    # --- Selection ---

    def select(self, node_id: str) -> None:
        self.clear_selection()
        if not self.graph.exists(node_id):
            return
        self.selected_id = node_id
        self.surface.show_tools(node_id)

    def clear_selection(self) -> None:
        if self.selected_id is not None:
            self.surface.clear_tools()
        self.selected_id = None

    def _target(self, node_id: str | None) -> ConceptNode | None:
        node_id = node_id or self.selected_id
        if node_id is None:
            return None
        return self.graph.get(node_id)

    # --- Commands ---

    async def expand(self, node_id: str | None = None) -> list[str]:
        """Ask the AI for sub-topics and attach them as numbered children.

        Returns the ids of the new nodes; empty when nothing was added.
        """
        node = self._target(node_id)
        if node is None:
            return []

        try:
            topics = await self.ai.expand(node.label)
        except OntomapError as e:
            logger.error("Expansion of %r failed: %s", node.label, e)
            self.surface.notify(EXPAND_FAILED)
            return []

        if not topics:
            return []
        # The node may have been retracted away while the request was in flight
        parent = self.graph.get(node.id)
        if parent is None:
            logger.warning(
                "Parent node %s removed during expansion; dropping %d topics", node.id, len(topics)
            )
            return []

        numbers = next_numbers(parent.number, len(self.graph.children(parent.id)), len(topics))
        new_ids = []
        for topic, number in zip(topics, numbers):
            child_id = self.graph.add_node(topic, 0, 0, number)
            self.graph.add_edge(parent.id, child_id)
            new_ids.append(child_id)

        logger.info("Expanded %r with %d topics", parent.label, len(new_ids))
        self.missions.relayout()
        return new_ids

    def retract(self, node_id: str | None = None) -> None:
        node = self._target(node_id)
        if node is None:
            return
        self.graph.remove_descendants(node.id)
        self.missions.relayout()

    def promote(self, node_id: str | None = None) -> Tab | None:
        """Spin the node's label off into a new mission with that label as root."""
        node = self._target(node_id)
        if node is None:
            return None

        limit = self.missions.config.promote_name_limit
        name = node.label if len(node.label) <= limit else node.label[: limit - 3] + "..."
        root = ConceptNode(
            id=uuid.uuid4().hex, label=node.label, number=ROOT_NUMBER, x=ROOT_X, y=ROOT_Y
        )
        snapshot = GraphSnapshot(nodes=[root])
        self.clear_selection()
        self.leave()
        return self.missions.add_tab(name, snapshot)

    async def start_mission(self, topic: str) -> str:
        """Reset the live graph to a single root for `topic` and expand it."""
        self.clear_selection()
        self.leave()
        self.graph.clear()
        root_id = self.graph.add_node(topic, 0, 0, ROOT_NUMBER)
        self.missions.relayout()
        await self.expand(root_id)
        return root_id

    # --- Viewport ---

    def zoom(self, delta: float, focal_x: float = 0.0, focal_y: float = 0.0) -> None:
        self.viewport.zoom(delta, focal_x, focal_y)
        self._push_viewport()

    def pan(self, dx: float, dy: float) -> None:
        self.viewport.pan(dx, dy)
        self._push_viewport()

    def _push_viewport(self) -> None:
        v = self.viewport
        self.surface.set_viewport(v.scale, v.translate_x, v.translate_y)


def build_controller(
    config: Config,
    ai: AIClient | None = None,
    surface: RenderSurface | None = None,
) -> InteractionController:
    """Wire a live graph, mission manager and AI client into one session."""
    missions = MissionManager(surface=surface, config=config.missions)
    return InteractionController(missions, ai or build_ai_client(config.ai))

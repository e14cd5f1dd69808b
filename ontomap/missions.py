"""Mission tabs — independent graph snapshots around one live graph."""

import itertools
import logging

from ontomap.config import MissionConfig
from ontomap.errors import TabNotFoundError
from ontomap.graph import ROOT_NUMBER, ConceptGraph
from ontomap.layout import compute_layout, edge_router
from ontomap.models import GraphSnapshot, LayoutMode, Tab
from ontomap.surface import RenderSurface

logger = logging.getLogger(__name__)

ROOT_X = 400
ROOT_Y = 300


class MissionManager:
    """Owns the tabs and the single live graph of the active tab.

    Inactive tabs hold only their snapshot. Switching saves the live graph into
    the previous tab, then loads the target; both steps happen in one call.
    """

    def __init__(
        self,
        graph: ConceptGraph | None = None,
        surface: RenderSurface | None = None,
        config: MissionConfig | None = None,
    ) -> None:
        self.graph = graph if graph is not None else ConceptGraph()
        self.surface = surface if surface is not None else RenderSurface()
        self.config = config or MissionConfig()
        self._ids = itertools.count(1)
        self._tabs: list[Tab] = []

        first = self._new_tab(self.config.first_tab_name, None)
        self._tabs.append(first)
        self.active_tab_id = first.id
        self._load(first)

    def __repr__(self) -> str:
        return f"MissionManager({len(self._tabs)} tabs, active={self.active_tab_id})"

    # --- Lookup ---

    @property
    def tabs(self) -> list[Tab]:
        return list(self._tabs)

    @property
    def active_tab(self) -> Tab:
        return self.get_tab(self.active_tab_id)

    @property
    def layout_mode(self) -> LayoutMode:
        return self.active_tab.layout_mode

    def get_tab(self, tab_id: str) -> Tab:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        raise TabNotFoundError(tab_id)

    def snapshot_of(self, tab_id: str) -> GraphSnapshot:
        """Current content of a tab; the active one is read from the live graph."""
        if tab_id == self.active_tab_id:
            return self.graph.serialize()
        return self.get_tab(tab_id).snapshot

    def next_tab_name(self) -> str:
        return f"{self.config.tab_name_prefix}-{len(self._tabs) + 1:02d}"

    # --- Tab lifecycle ---

    def _new_tab(self, name: str, snapshot: GraphSnapshot | None) -> Tab:
        return Tab(
            id=f"mission-{next(self._ids)}",
            name=name,
            snapshot=snapshot.model_copy(deep=True) if snapshot is not None else GraphSnapshot(),
            layout_mode=self.config.default_layout,
        )

    def add_tab(self, name: str, snapshot: GraphSnapshot | None = None) -> Tab:
        """Create a tab and make it active."""
        tab = self._new_tab(name, snapshot)
        self._tabs.append(tab)
        logger.info("Added tab %s (%s)", tab.id, name)
        self.switch_active(tab.id)
        return tab

    def close_tab(self, tab_id: str) -> bool:
        """Remove a tab. The last remaining tab cannot be closed."""
        tab = self.get_tab(tab_id)
        if len(self._tabs) <= 1:
            logger.info("Refusing to close the only tab %s", tab_id)
            return False

        self._tabs.remove(tab)
        logger.info("Closed tab %s", tab_id)
        if tab_id == self.active_tab_id:
            # The closed tab's live graph is discarded, not saved
            successor = self._tabs[-1]
            self.active_tab_id = successor.id
            self._load(successor)
        return True

    def rename_tab(self, tab_id: str, name: str) -> None:
        self.get_tab(tab_id).name = name

    def switch_active(self, tab_id: str) -> None:
        target = self.get_tab(tab_id)
        previous = self.get_tab(self.active_tab_id)
        # Overwrite even when empty: a reset mission must stay reset
        previous.snapshot = self.graph.serialize()
        self.active_tab_id = target.id
        self._load(target)
        logger.debug("Switched from %s to %s", previous.id, target.id)

    def _load(self, tab: Tab) -> None:
        self.graph.clear()
        if tab.snapshot.is_empty:
            self.graph.add_node(tab.name, ROOT_X, ROOT_Y, ROOT_NUMBER)
        else:
            self.graph.deserialize(tab.snapshot)
        self.relayout()

    # --- Layout ---

    def set_layout_mode(self, tab_id: str, mode: LayoutMode | str) -> None:
        tab = self.get_tab(tab_id)
        tab.layout_mode = LayoutMode(mode.upper())
        if tab_id == self.active_tab_id:
            self.relayout()

    def relayout(self) -> None:
        """Lay out the live graph under the active tab's mode and push it to the surface."""
        mode = self.active_tab.layout_mode
        positions = compute_layout(self.graph, mode)
        self.graph.apply_positions(positions)
        self.surface.set_router(edge_router(mode))
        self.surface.apply_positions(positions)

"""Tests for mission tabs: save-on-switch, restore-on-activate, close rules."""

import pytest

from ontomap.errors import TabNotFoundError
from ontomap.graph import ConceptGraph
from ontomap.layout import compute_layout
from ontomap.missions import MissionManager
from ontomap.models import ConceptNode, GraphSnapshot, LayoutMode


def _labels(graph: ConceptGraph) -> list[str]:
    return [n.label for n in graph.nodes]


class TestInitialState:
    def test_one_seeded_tab(self, manager):
        assert len(manager.tabs) == 1
        tab = manager.active_tab
        assert tab.name == "Mission 1"
        assert tab.layout_mode == LayoutMode.MINDMAP
        assert _labels(manager.graph) == ["Mission 1"]
        assert manager.graph.nodes[0].number == "0"

    def test_initial_layout_pushed(self, manager, surface):
        root = manager.graph.nodes[0]
        assert root.position == (800, 600)
        assert surface.positions == {root.id: (800, 600)}
        assert surface.router == "manhattan"


class TestAddAndSwitch:
    def test_add_tab_becomes_active(self, manager):
        tab = manager.add_tab("B")
        assert manager.active_tab_id == tab.id
        assert tab.layout_mode == LayoutMode.MINDMAP
        assert len({t.id for t in manager.tabs}) == 2

    def test_switch_keeps_previous_snapshot(self, manager):
        a_id = manager.active_tab_id
        manager.graph.add_node("X", node_id="x")

        b = manager.add_tab("B")

        stored = manager.get_tab(a_id).snapshot
        assert [n.id for n in stored.nodes][-1] == "x"
        assert "X" in [n.label for n in stored.nodes]
        assert _labels(manager.graph) == ["B"]
        assert manager.graph.nodes[0].number == "0"
        assert manager.active_tab_id == b.id

    def test_switch_back_restores(self, manager):
        a_id = manager.active_tab_id
        manager.graph.add_node("X", node_id="x")
        manager.add_tab("B")
        manager.switch_active(a_id)
        assert manager.graph.exists("x")
        assert _labels(manager.graph) == ["Mission 1", "X"]

    def test_reset_graph_saved_as_empty(self, manager):
        a_id = manager.active_tab_id
        manager.graph.clear()
        manager.add_tab("B")
        assert manager.get_tab(a_id).snapshot.is_empty

    def test_empty_tab_reseeded_with_its_name(self, manager):
        a_id = manager.active_tab_id
        manager.graph.clear()
        manager.add_tab("B")
        manager.switch_active(a_id)
        assert _labels(manager.graph) == ["Mission 1"]

    def test_add_tab_with_snapshot(self, manager):
        snapshot = GraphSnapshot(nodes=[ConceptNode(id="n1", label="Seed", number="0")])
        manager.add_tab("Seeded", snapshot)
        assert [n.id for n in manager.graph.nodes] == ["n1"]
        snapshot.nodes[0].label = "changed"
        assert manager.graph.get("n1").label == "Seed"

    def test_switch_unknown_tab_changes_nothing(self, manager):
        before = manager.active_tab_id
        manager.graph.add_node("X")
        with pytest.raises(TabNotFoundError):
            manager.switch_active("nope")
        assert manager.active_tab_id == before
        assert len(manager.graph) == 2

    def test_switch_uses_target_layout_mode(self, manager):
        a_id = manager.active_tab_id
        manager.set_layout_mode(a_id, LayoutMode.MATRIX)
        manager.add_tab("B")
        manager.switch_active(a_id)
        assert manager.graph.nodes[0].position == (100, 100)

    def test_snapshot_of_active_reads_live_graph(self, manager):
        manager.graph.add_node("Live")
        labels = [n.label for n in manager.snapshot_of(manager.active_tab_id).nodes]
        assert "Live" in labels


class TestCloseTab:
    def test_last_tab_cannot_close(self, manager):
        assert manager.close_tab(manager.active_tab_id) is False
        assert len(manager.tabs) == 1

    def test_close_active_activates_last(self, manager):
        a_id = manager.active_tab_id
        b = manager.add_tab("B")
        c = manager.add_tab("C")
        manager.switch_active(b.id)

        assert manager.close_tab(b.id) is True
        assert manager.active_tab_id == c.id
        assert _labels(manager.graph) == ["C"]
        assert [t.id for t in manager.tabs] == [a_id, c.id]

    def test_close_inactive_keeps_active(self, manager):
        a_id = manager.active_tab_id
        b = manager.add_tab("B")
        manager.graph.add_node("keep me")
        assert manager.close_tab(a_id) is True
        assert manager.active_tab_id == b.id
        assert "keep me" in _labels(manager.graph)

    def test_close_unknown_raises(self, manager):
        with pytest.raises(TabNotFoundError):
            manager.close_tab("nope")


class TestLayoutMode:
    def test_active_mode_applies_immediately(self, manager):
        manager.graph.add_node("second")
        manager.set_layout_mode(manager.active_tab_id, LayoutMode.MATRIX)
        assert [n.position for n in manager.graph.nodes] == [(100, 100), (350, 100)]

    def test_lowercase_mode_accepted(self, manager):
        manager.set_layout_mode(manager.active_tab_id, "timeline")
        assert manager.layout_mode == LayoutMode.TIMELINE
        assert manager.graph.nodes[0].position == (100, 400)

    def test_inactive_mode_stored_only(self, manager):
        a_id = manager.active_tab_id
        manager.add_tab("B")
        before = manager.graph.serialize()
        manager.set_layout_mode(a_id, "TIMELINE")
        assert manager.get_tab(a_id).layout_mode == LayoutMode.TIMELINE
        assert manager.graph.serialize() == before

    def test_relayout_matches_engine(self, manager):
        manager.graph.add_node("child", node_id="child")
        manager.graph.add_edge(manager.graph.nodes[0].id, "child")
        expected = compute_layout(manager.graph, LayoutMode.MINDMAP)
        manager.relayout()
        assert manager.graph.get("child").position == expected["child"]


class TestNaming:
    def test_next_tab_name(self, manager):
        assert manager.next_tab_name() == "OP-02"
        manager.add_tab(manager.next_tab_name())
        assert manager.next_tab_name() == "OP-03"

    def test_rename(self, manager):
        manager.rename_tab(manager.active_tab_id, "Renamed")
        assert manager.active_tab.name == "Renamed"

    def test_custom_graph_instance_is_used(self):
        graph = ConceptGraph()
        manager = MissionManager(graph=graph)
        assert manager.graph is graph
        assert len(graph) == 1

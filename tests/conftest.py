"""Shared test fixtures for ontomap tests."""

import asyncio

import pytest

from ontomap.ai_client import AIClient
from ontomap.controller import InteractionController
from ontomap.errors import AIServiceError
from ontomap.graph import ConceptGraph
from ontomap.missions import MissionManager
from ontomap.surface import RenderSurface


class RecordingSurface(RenderSurface):
    """Surface that remembers every call for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []
        self.positions: dict[str, tuple[float, float]] = {}
        self.node_opacity: dict[str, float] = {}
        self.edge_opacity: dict[tuple[str, str], float] = {}
        self.tools_for: str | None = None
        self.detail: tuple[str, str] | None = None
        self.notifications: list[str] = []
        self.router: str | None = None

    def apply_positions(self, positions):
        self.calls.append(("apply_positions", (len(positions),)))
        self.positions = dict(positions)

    def set_router(self, router):
        self.router = router

    def highlight(self, node_opacity, edge_opacity):
        self.calls.append(("highlight", ()))
        self.node_opacity = dict(node_opacity)
        self.edge_opacity = dict(edge_opacity)

    def reset_highlight(self):
        self.calls.append(("reset_highlight", ()))
        self.node_opacity = {}
        self.edge_opacity = {}

    def show_tools(self, node_id):
        self.calls.append(("show_tools", (node_id,)))
        self.tools_for = node_id

    def clear_tools(self):
        self.calls.append(("clear_tools", ()))
        self.tools_for = None

    def show_detail(self, label, text):
        self.detail = (label, text)

    def hide_detail(self):
        self.detail = None

    def notify(self, message):
        self.notifications.append(message)


class FakeAI(AIClient):
    """Scripted AI collaborator.

    `topics` maps a label to the sub-topics returned for it. Setting `gate`
    makes every call wait on that event, so tests can mutate the graph while
    a request is in flight.
    """

    def __init__(self, topics=None, descriptions=None, fail=False):
        self.topics = topics or {}
        self.descriptions = descriptions or {}
        self.fail = fail
        self.gate: asyncio.Event | None = None
        self.expand_calls: list[str] = []
        self.describe_calls: list[str] = []

    async def _wait(self):
        if self.gate is not None:
            await self.gate.wait()

    async def expand(self, label):
        self.expand_calls.append(label)
        await self._wait()
        if self.fail:
            raise AIServiceError("boom")
        return list(self.topics.get(label, []))

    async def describe(self, label):
        self.describe_calls.append(label)
        await self._wait()
        if self.fail:
            raise AIServiceError("boom")
        return self.descriptions.get(label, f"About {label}")

    async def bridge(self, start, end):
        return []


@pytest.fixture()
def graph():
    return ConceptGraph()


@pytest.fixture()
def tree_graph():
    """root(0) -> a(1) -> a1(1.1), a2(1.2); root -> b(2)."""
    g = ConceptGraph()
    g.add_node("root", number="0", node_id="root")
    g.add_node("a", number="1", node_id="a")
    g.add_node("b", number="2", node_id="b")
    g.add_node("a1", number="1.1", node_id="a1")
    g.add_node("a2", number="1.2", node_id="a2")
    g.add_edge("root", "a")
    g.add_edge("root", "b")
    g.add_edge("a", "a1")
    g.add_edge("a", "a2")
    return g


@pytest.fixture()
def surface():
    return RecordingSurface()


@pytest.fixture()
def manager(surface):
    return MissionManager(surface=surface)


@pytest.fixture()
def fake_ai():
    return FakeAI(
        topics={
            "Mission 1": ["Alpha", "Beta", "Gamma"],
            "Alpha": ["Alpha one", "Alpha two"],
        },
    )


@pytest.fixture()
def controller(manager, fake_ai):
    return InteractionController(manager, fake_ai)


@pytest.fixture()
def failing_ai():
    return FakeAI(fail=True)

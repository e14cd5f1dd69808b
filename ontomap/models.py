"""Pydantic models for ontomap."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LayoutMode(str, Enum):
    MINDMAP = "MINDMAP"
    LOGIC = "LOGIC"
    BRACE = "BRACE"
    ORG = "ORG"
    TREE = "TREE"
    TIMELINE = "TIMELINE"
    FISHBONE = "FISHBONE"
    TREETABLE = "TREETABLE"
    MATRIX = "MATRIX"


class RankDirection(str, Enum):
    """Raw directions understood by the layered strategy."""
    LR = "LR"
    RL = "RL"
    TB = "TB"
    BT = "BT"


class InteractionState(str, Enum):
    IDLE = "idle"
    HOVERING = "hovering"
    SELECTED = "selected"


# --- Graph records (what goes into a snapshot) ---


class ConceptNode(BaseModel):
    """A concept vertex. `number` is the dotted expansion path ("", "0", "2.3")."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    label: str
    number: str = Field(default="", alias="hierarchicalNumber")
    x: float = 0.0
    y: float = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)


class ConceptEdge(BaseModel):
    """Directed "expands-to" relationship."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    source: str = Field(alias="sourceId")
    target: str = Field(alias="targetId")


class GraphSnapshot(BaseModel):
    """Serialized graph as stored in a tab: nodes and edges in insertion order."""
    nodes: list[ConceptNode] = Field(default_factory=list)
    edges: list[ConceptEdge] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes


def snapshot_to_json(snapshot: GraphSnapshot, indent: int | None = 2) -> str:
    return snapshot.model_dump_json(by_alias=True, indent=indent)


def snapshot_from_json(text: str) -> GraphSnapshot:
    return GraphSnapshot.model_validate_json(text)


# --- Missions ---


class Tab(BaseModel):
    """One mission: an independent diagram with its own layout mode.

    Only the active tab's graph is live; every other tab holds just its snapshot.
    """
    id: str
    name: str
    snapshot: GraphSnapshot = Field(default_factory=GraphSnapshot)
    layout_mode: LayoutMode = LayoutMode.MINDMAP

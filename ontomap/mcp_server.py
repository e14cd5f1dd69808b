#!/usr/bin/env python3
"""ontomap MCP server — drive a concept-map session from an MCP client."""

import json
import logging
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from ontomap.config import load_config
from ontomap.controller import InteractionController, build_controller
from ontomap.errors import OntomapError

mcp = FastMCP("ontomap")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_controller: InteractionController | None = None


def _get_controller() -> InteractionController:
    global _controller
    if _controller is None:
        _controller = build_controller(load_config())
    return _controller


def _graph_payload(controller: InteractionController) -> dict[str, object]:
    tab = controller.missions.active_tab
    return {
        "tab": {"id": tab.id, "name": tab.name, "layout_mode": tab.layout_mode.value},
        "graph": controller.graph.serialize().model_dump(by_alias=True),
    }


def _require_node(controller: InteractionController, node_id: str) -> None:
    if not controller.graph.exists(node_id):
        raise ValueError(f"Node not found: {node_id}")


@mcp.tool()
async def start_mission(topic: str) -> str:
    """Reset the active mission to a root concept and expand it with AI sub-topics."""
    try:
        controller = _get_controller()
        await controller.start_mission(topic)
        return json.dumps(_graph_payload(controller))
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
async def expand_node(node_id: str) -> str:
    """Add AI-generated sub-topics under a node. Returns the new node ids."""
    try:
        controller = _get_controller()
        _require_node(controller, node_id)
        new_ids = await controller.expand(node_id)
        return json.dumps({"added": new_ids, **_graph_payload(controller)})
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def retract_node(node_id: str) -> str:
    """Remove every descendant of a node, keeping the node itself."""
    try:
        controller = _get_controller()
        _require_node(controller, node_id)
        controller.retract(node_id)
        return json.dumps(_graph_payload(controller))
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def promote_node(node_id: str) -> str:
    """Open a new mission whose root is this node's label."""
    try:
        controller = _get_controller()
        _require_node(controller, node_id)
        tab = controller.promote(node_id)
        return json.dumps({"id": tab.id, "name": tab.name})
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
async def describe_node(node_id: str) -> str:
    """Short AI description of a node's concept."""
    try:
        controller = _get_controller()
        _require_node(controller, node_id)
        text = await controller.hover(node_id)
        controller.leave()
        return json.dumps({"node_id": node_id, "description": text})
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def set_layout(mode: str, tab_id: Optional[str] = None) -> str:
    """Set a mission's layout mode (MINDMAP, LOGIC, BRACE, ORG, TREE, TIMELINE, FISHBONE, TREETABLE, MATRIX)."""
    try:
        controller = _get_controller()
        missions = controller.missions
        missions.set_layout_mode(tab_id or missions.active_tab_id, mode)
        return json.dumps(_graph_payload(controller))
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def list_tabs() -> str:
    """List missions with their layout modes and node counts."""
    missions = _get_controller().missions
    result = [
        {
            "id": tab.id,
            "name": tab.name,
            "layout_mode": tab.layout_mode.value,
            "active": tab.id == missions.active_tab_id,
            "nodes": len(missions.snapshot_of(tab.id).nodes),
        }
        for tab in missions.tabs
    ]
    return json.dumps(result)


@mcp.tool()
def new_tab(name: Optional[str] = None) -> str:
    """Open an empty mission and make it active."""
    missions = _get_controller().missions
    tab = missions.add_tab(name or missions.next_tab_name())
    return json.dumps({"id": tab.id, "name": tab.name})


@mcp.tool()
def switch_tab(tab_id: str) -> str:
    """Make another mission active."""
    try:
        controller = _get_controller()
        controller.missions.switch_active(tab_id)
        return json.dumps(_graph_payload(controller))
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def close_tab(tab_id: str) -> str:
    """Close a mission. The last remaining mission cannot be closed."""
    try:
        missions = _get_controller().missions
        closed = missions.close_tab(tab_id)
        return json.dumps({"closed": closed, "active": missions.active_tab_id})
    except (ValueError, KeyError, OntomapError) as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_graph() -> str:
    """Nodes (with positions and hierarchical numbers) and edges of the active mission."""
    return json.dumps(_graph_payload(_get_controller()))


if __name__ == "__main__":
    mcp.run()

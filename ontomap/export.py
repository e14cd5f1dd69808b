"""Export a concept graph as JSON data, a Markdown outline or an HTML report."""

import html
from datetime import datetime

from ontomap.graph import ConceptGraph
from ontomap.layout import find_root
from ontomap.models import ConceptNode, snapshot_to_json

FORMATS = ("json", "md", "html")


def export_json(graph: ConceptGraph) -> str:
    return snapshot_to_json(graph.serialize())


def outline(graph: ConceptGraph) -> list[tuple[int, ConceptNode]]:
    """(depth, node) pairs in depth-first order from the root, then any unreached nodes."""
    rows: list[tuple[int, ConceptNode]] = []
    seen: set[str] = set()
    root = find_root(graph)
    starts = ([root] if root else []) + graph.nodes
    for start in starts:
        if start.id in seen:
            continue
        stack = [(start, 0)]
        while stack:
            node, depth = stack.pop()
            if node.id in seen:
                continue
            seen.add(node.id)
            rows.append((depth, node))
            for child in reversed(graph.children(node.id)):
                if child.id not in seen:
                    stack.append((child, depth + 1))
    return rows


def _title(node: ConceptNode) -> str:
    if node.number and node.number != "0":
        return f"{node.number} {node.label}"
    return node.label


def export_markdown(graph: ConceptGraph, title: str | None = None) -> str:
    rows = outline(graph)
    if not rows:
        return f"# {title or 'Empty mission'}\n"

    lines = [f"# {title or rows[0][1].label}", ""]
    for depth, node in rows:
        if depth == 0 and node is rows[0][1]:
            continue
        indent = "  " * max(depth - 1, 0)
        lines.append(f"{indent}- {_title(node)}")
    lines.append("")
    return "\n".join(lines)


def export_html(graph: ConceptGraph, title: str | None = None) -> str:
    rows = outline(graph)
    heading = title or (rows[0][1].label if rows else "Empty mission")
    labels = {n.id: n.label for n in graph.nodes}

    items = "\n".join(
        f'<li style="margin-left:{depth * 1.5}em">{html.escape(_title(node))}</li>'
        for depth, node in rows
    )
    edge_rows = "\n".join(
        f"<tr><td>{html.escape(labels[e.source])}</td><td>{html.escape(labels[e.target])}</td></tr>"
        for e in graph.edges
    )
    generated = datetime.now().strftime("%Y-%m-%d %H:%M")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{html.escape(heading)}</title>
<style>
  body {{ font-family: monospace; background: #0f172a; color: #f8fafc; padding: 2em; }}
  h1 {{ color: #06b6d4; }}
  ul {{ list-style: none; padding: 0; }}
  table {{ border-collapse: collapse; margin-top: 1em; }}
  td, th {{ border: 1px solid #334155; padding: 4px 8px; }}
</style>
</head>
<body>
<h1>{html.escape(heading)}</h1>
<p>{len(graph)} concepts, {len(graph.edges)} links. Generated {generated}.</p>
<h2>Outline</h2>
<ul>
{items}
</ul>
<h2>Links</h2>
<table>
<tr><th>From</th><th>To</th></tr>
{edge_rows}
</table>
</body>
</html>
"""


def export_graph(graph: ConceptGraph, fmt: str, title: str | None = None) -> str:
    if fmt == "json":
        return export_json(graph)
    if fmt == "md":
        return export_markdown(graph, title)
    if fmt == "html":
        return export_html(graph, title)
    raise ValueError(f"Unknown export format: {fmt} (expected one of {', '.join(FORMATS)})")

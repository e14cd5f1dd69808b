"""CLI entry point for ontomap."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ontomap.ai_client import build_ai_client
from ontomap.config import Config, load_config
from ontomap.controller import InteractionController, build_controller
from ontomap.errors import ConfigurationError
from ontomap.export import FORMATS, export_graph, export_json
from ontomap.graph import ConceptGraph
from ontomap.layout import STRATEGY_NAMES, compute_layout
from ontomap.models import LayoutMode, RankDirection, snapshot_from_json
from ontomap.surface import LoggingSurface

logger = logging.getLogger(__name__)

LAYOUT_CHOICES = [m.value for m in LayoutMode] + [d.value for d in RankDirection]


async def explore(controller: InteractionController, topic: str, depth: int) -> None:
    """Start a mission on `topic` and expand breadth-first `depth` levels deep."""
    root_id = await controller.start_mission(topic)
    # start_mission already expanded the root
    frontier = [c.id for c in controller.graph.children(root_id)]
    for level in range(1, depth):
        next_frontier: list[str] = []
        for node_id in frontier:
            next_frontier.extend(await controller.expand(node_id))
        logger.info("Level %d: %d new concepts", level + 1, len(next_frontier))
        frontier = next_frontier


def _write(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text)
        print(f"Wrote {output}")
    else:
        print(text)


def main() -> None:
    parser = argparse.ArgumentParser(description="ontomap concept explorer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # explore command
    explore_parser = sub.add_parser("explore", help="Grow a concept map from a topic")
    explore_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    explore_parser.add_argument("topic", help="Root concept")
    explore_parser.add_argument("--depth", type=int, default=1, help="Expansion levels (default 1)")
    explore_parser.add_argument(
        "--layout", choices=[m.value for m in LayoutMode], default=None,
        help="Layout mode (default from config)",
    )
    explore_parser.add_argument("--format", choices=FORMATS, default="json", help="Output format")
    explore_parser.add_argument("--output", "-o", default=None, help="Write to file instead of stdout")
    explore_parser.add_argument("--demo", action="store_true", help="Use canned AI answers")

    # layout command
    layout_parser = sub.add_parser("layout", help="Re-layout a stored graph snapshot")
    layout_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    layout_parser.add_argument("snapshot", type=Path, help="Snapshot JSON file")
    layout_parser.add_argument("--mode", choices=LAYOUT_CHOICES, default=LayoutMode.MINDMAP.value)
    layout_parser.add_argument("--output", "-o", default=None, help="Write to file instead of stdout")

    # describe command
    describe_parser = sub.add_parser("describe", help="Short AI description of a concept")
    describe_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    describe_parser.add_argument("label", help="Concept label")

    # bridge command
    bridge_parser = sub.add_parser("bridge", help="AI steps connecting two concepts")
    bridge_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    bridge_parser.add_argument("start", help="Starting concept")
    bridge_parser.add_argument("end", help="Ending concept")

    # modes command
    modes_parser = sub.add_parser("modes", help="List layout modes")
    modes_parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "explore":
            _explore(args, config)

        elif args.command == "layout":
            graph = ConceptGraph.from_snapshot(snapshot_from_json(args.snapshot.read_text()))
            graph.apply_positions(compute_layout(graph, args.mode))
            _write(export_json(graph), args.output)

        elif args.command == "describe":
            client = build_ai_client(config.ai)
            print(asyncio.run(client.describe(args.label)))

        elif args.command == "bridge":
            client = build_ai_client(config.ai)
            steps = asyncio.run(client.bridge(args.start, args.end))
            if not steps:
                print("No bridge found.")
            for i, step in enumerate(steps, 1):
                print(f"  {i}. {step}")

        elif args.command == "modes":
            for mode in LayoutMode:
                print(f"  {mode.value:<10} {STRATEGY_NAMES[mode]}")

        else:
            parser.print_help()

    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _explore(args: argparse.Namespace, config: Config) -> None:
    if args.demo:
        config.ai.demo_mode = True
        config.ai.demo_latency = 0.0
    # Fail before any graph work when the key is missing
    if not config.ai.demo_mode and not config.ai.resolved_api_key:
        raise ConfigurationError(f"API key is missing. Set ${config.ai.api_key_env}.")

    controller = build_controller(config, surface=LoggingSurface())
    if args.layout:
        controller.missions.set_layout_mode(controller.missions.active_tab_id, args.layout)
    controller.missions.rename_tab(controller.missions.active_tab_id, args.topic)

    asyncio.run(explore(controller, args.topic, args.depth))
    _write(export_graph(controller.graph, args.format, title=args.topic), args.output)


if __name__ == "__main__":
    main()

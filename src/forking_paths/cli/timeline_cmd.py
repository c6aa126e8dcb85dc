"""Timeline CLI commands: layout, path, scene, show."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from forking_paths.active_path import compute_active_path
from forking_paths.cli._format import format_coordinate, format_table, print_json, print_lines
from forking_paths.config import TimelineConfig, load_config
from forking_paths.exceptions import ConfigError, TreeConfigError
from forking_paths.scene import build_scene
from forking_paths.tree import ROOT_ID, DialogueTree
from forking_paths.viewport import ViewportState
from forking_paths.visualizer import TimelineVisualizer

if TYPE_CHECKING:
    from rich.tree import Tree


def _require_rich() -> None:
    """Exit with a clear message if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        print("Error: rich is required for 'show'. Install with: pip install forking-paths[rich]")
        raise typer.Exit(1) from None


def load_tree(path: str) -> DialogueTree:
    """Read a dialogue tree from a JSON file, exiting on bad input."""
    try:
        data = json.loads(Path(path).read_text())
    except FileNotFoundError:
        print(f"Error: No such file: '{path}'")
        raise typer.Exit(1) from None
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON: {e}")
        raise typer.Exit(1) from e

    try:
        return DialogueTree.from_dict(data)
    except TreeConfigError as e:
        print(f"Error: Invalid dialogue tree in '{path}':\n{e}")
        raise typer.Exit(1) from e


def _config(order: str | None) -> TimelineConfig:
    try:
        config = load_config()
        if order is not None:
            config = replace(config, layout=replace(config.layout, order=order))
    except ConfigError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e
    return config


def _mount(path: str, order: str | None = None) -> TimelineVisualizer:
    return TimelineVisualizer(load_tree(path), config=_config(order))


def register_commands(app: typer.Typer) -> None:
    """Register the timeline commands as top-level commands on the app."""

    @app.command("layout")
    def layout_cmd(
        tree_file: Annotated[str, typer.Argument(help="Dialogue tree JSON file")],
        order: Annotated[str | None, typer.Option("--order", help="'bfs' or 'insertion'")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Place every node and print the resulting positions."""
        viz = _mount(tree_file, order)
        tree = viz.tree

        if as_json or output:
            data = {
                "order": viz.config.layout.order,
                "positions": {node_id: pos.to_dict() for node_id, pos in viz.positions.items()},
            }
            print_json("layout", data, output)
            return

        headers = ["Node", "Branch", "Parent", "X", "Y"]
        rows = []
        for node_id in viz.positions:
            node = tree[node_id]
            pos = viz.positions[node_id]
            rows.append(
                [
                    node_id,
                    node.branch_type.value if node.parent_id else "—",
                    node.parent_id or "—",
                    format_coordinate(pos.x),
                    format_coordinate(pos.y),
                ]
            )

        print(f"\n  Layout ({len(rows)} nodes, order={viz.config.layout.order}):\n")
        print_lines(format_table(headers, rows))

    @app.command("path")
    def path_cmd(
        tree_file: Annotated[str, typer.Argument(help="Dialogue tree JSON file")],
        node_id: Annotated[str | None, typer.Option("--node", help="Node to trace (default: current node)")] = None,
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    ):
        """Show the active path from the root to a node."""
        tree = load_tree(tree_file)
        target = node_id or tree.current_node_id
        if target not in tree:
            print(f"Error: Node '{target}' not found in '{tree_file}'")
            raise typer.Exit(1)

        path = compute_active_path(target, tree.nodes)
        ordered = _root_first(tree, target, path)

        if as_json:
            print_json("path", {"node": target, "path": ordered})
            return
        print(" -> ".join(ordered))

    @app.command("scene")
    def scene_cmd(
        tree_file: Annotated[str, typer.Argument(help="Dialogue tree JSON file")],
        scale: Annotated[float, typer.Option("--scale", help="Viewport scale")] = 1.0,
        offset_x: Annotated[float, typer.Option("--offset-x", help="Viewport x offset")] = 0.0,
        offset_y: Annotated[float, typer.Option("--offset-y", help="Viewport y offset")] = 0.0,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
    ):
        """Export the full render snapshot as JSON."""
        viz = _mount(tree_file)
        viewport_config = viz.config.viewport
        clamped = min(max(scale, viewport_config.min_scale), viewport_config.max_scale)
        scene = build_scene(
            viz.tree,
            viz.positions.snapshot(),
            viz.active_path.path,
            ViewportState(scale=clamped, offset_x=offset_x, offset_y=offset_y),
            grid_size=viewport_config.grid_size,
        )
        print_json("scene", scene.to_dict(), output)

    @app.command("show")
    def show_cmd(
        tree_file: Annotated[str, typer.Argument(help="Dialogue tree JSON file")],
    ):
        """Print the tree with the active path highlighted."""
        _require_rich()
        from rich.console import Console

        tree = load_tree(tree_file)
        Console().print(build_rich_tree(tree))


def _root_first(tree: DialogueTree, target: str, path: frozenset[str]) -> list[str]:
    chain: list[str] = []
    walk: str | None = target
    while walk is not None and walk in path and walk not in chain:
        chain.append(walk)
        walk = tree[walk].parent_id
    return list(reversed(chain))


def build_rich_tree(tree: DialogueTree) -> Tree:
    """Rich tree of the dialogue, active path in bold, current node starred."""
    from rich.tree import Tree

    path = compute_active_path(tree.current_node_id, tree.nodes)

    def label(node_id: str) -> str:
        node = tree[node_id]
        text = node_id if node.parent_id is None else f"{node_id} [dim]({node.branch_type.value})[/dim]"
        if node_id == tree.current_node_id:
            text = f"★ {text}"
        if node_id in path:
            text = f"[bold green]{text}[/bold green]"
        return text

    root = Tree(label(ROOT_ID))
    stack = [(ROOT_ID, root)]
    while stack:
        node_id, branch = stack.pop()
        for child_id in tree.children(node_id):
            stack.append((child_id, branch.add(label(child_id))))
    return root

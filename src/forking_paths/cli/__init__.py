"""forking-paths CLI — lay out and inspect dialogue timelines.

Entry point for the `forking-paths` command. Requires ``pip install forking-paths[cli]``.

Commands:
    layout   Place every node and print positions
    path     Show the active path to a node
    scene    Export the render snapshot as JSON
    show     Print the tree with the active path highlighted (needs rich)
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install forking-paths[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from forking_paths.cli.timeline_cmd import register_commands

    app = typer.Typer(
        name="forking-paths",
        help="Branching dialogue timeline layout CLI.",
        no_args_is_help=True,
    )
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()

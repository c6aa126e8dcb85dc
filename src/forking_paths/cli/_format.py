"""Text and JSON rendering for CLI output."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

# Bump when the layout of the "data" payload changes incompatibly
SCHEMA_VERSION = 1

MAX_LINES = 100

UNPLACED_CELL = "—"

# Columns rendered right-aligned
NUMERIC_COLUMNS = frozenset({"X", "Y"})


def json_envelope(command: str, data: Any) -> dict[str, Any]:
    """Versioned wrapper around a command's JSON payload."""
    return {
        "schema_version": SCHEMA_VERSION,
        "command": command,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "data": data,
    }


def print_json(command: str, data: Any, output: str | None = None) -> None:
    """Print the enveloped payload, or write it to *output* and say so."""
    text = json.dumps(json_envelope(command, data), indent=2, default=str)
    if not output:
        print(text)
        return

    target = Path(output)
    target.write_text(text)
    print(f"Wrote {command} output to {target} ({len(text.encode()) / 1024:.1f}KB)")


def format_coordinate(value: float | None) -> str:
    """400.0 -> '400', 210.5 -> '210.5', None -> '—'."""
    if value is None:
        return UNPLACED_CELL
    return f"{value:.1f}".rstrip("0").rstrip(".")


def format_table(headers: list[str], rows: list[list[str]], indent: int = 2) -> list[str]:
    """Aligned plain-text table; coordinate columns are right-aligned.

    Cells beyond the header count are dropped. Returns the lines unprinted.
    """
    if not rows:
        return []

    columns = len(headers)
    widths = [max([len(header), *(len(row[i]) for row in rows if i < len(row))]) for i, header in enumerate(headers)]

    def render(cells: list[str]) -> str:
        padded = [
            cell.rjust(widths[i]) if headers[i] in NUMERIC_COLUMNS else cell.ljust(widths[i])
            for i, cell in enumerate(cells[:columns])
        ]
        return " " * indent + "  ".join(padded)

    header_line = " " * indent + "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    rule = " " * indent + "  ".join("─" * w for w in widths)
    return [header_line, rule, *(render(row) for row in rows)]


def print_lines(lines: list[str], max_lines: int = MAX_LINES) -> None:
    """Print at most *max_lines* lines, then a note on how many were cut."""
    print("\n".join(lines[:max_lines]))
    hidden = len(lines) - max_lines
    if hidden > 0:
        print(f"\n  # ... {hidden} more lines (use --json for the full output)")

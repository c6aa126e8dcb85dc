"""Layout and viewport settings, optionally read from pyproject.toml.

Reads the ``[tool.forking-paths]`` section. Every setting has a default, so
an absent file or section yields the stock configuration::

    [tool.forking-paths.layout]
    horizontal_spacing = 400
    vertical_spacing = 300
    order = "bfs"

    [tool.forking-paths.viewport]
    min_scale = 0.1
    max_scale = 3.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal

from forking_paths.exceptions import ConfigError

SECTION = "forking-paths"

VisitOrder = Literal["bfs", "insertion"]


def _require_numbers(config: Any, prefix: str) -> None:
    """Reject non-numeric values for float fields before any comparison."""
    for f in fields(config):
        if f.type != "float":
            continue
        value = getattr(config, f.name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{prefix}.{f.name}", value, "Must be a number")


@dataclass(frozen=True)
class LayoutConfig:
    """Geometry of automatic placement.

    Attributes:
        horizontal_spacing: H, the horizontal spacing unit
        vertical_spacing: V, the vertical spacing unit
        root_x: Scene x of the root anchor
        root_y: Scene y of the root anchor
        collision_factor: Fraction of H and V under which two nodes overlap
        displacement_factor: Fraction of V a colliding candidate moves down
        order: Node visitation order for a layout pass
    """

    horizontal_spacing: float = 400.0
    vertical_spacing: float = 300.0
    root_x: float = 400.0
    root_y: float = 300.0
    collision_factor: float = 0.8
    displacement_factor: float = 0.5
    order: VisitOrder = "bfs"

    def __post_init__(self) -> None:
        _require_numbers(self, "layout")
        for name in ("horizontal_spacing", "vertical_spacing", "collision_factor", "displacement_factor"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigError(f"layout.{name}", value, "Must be a positive number")
        if self.order not in ("bfs", "insertion"):
            raise ConfigError("layout.order", self.order, "Must be 'bfs' or 'insertion'")

    @property
    def collision_reach(self) -> tuple[float, float]:
        """(dx, dy) under which two positions collide."""
        return (
            self.horizontal_spacing * self.collision_factor,
            self.vertical_spacing * self.collision_factor,
        )

    @property
    def displacement_step(self) -> float:
        """Vertical distance a colliding candidate moves per retry."""
        return self.vertical_spacing * self.displacement_factor


@dataclass(frozen=True)
class ViewportConfig:
    """Zoom limits and sensitivities.

    Attributes:
        min_scale: Lower clamp for the scale
        max_scale: Upper clamp for the scale
        zoom_sensitivity: Scale change per wheel delta unit
        button_factor: Multiplier applied by the zoom in/out buttons
        grid_size: Background grid cell size at scale 1
    """

    min_scale: float = 0.1
    max_scale: float = 3.0
    zoom_sensitivity: float = 0.001
    button_factor: float = 1.2
    grid_size: float = 20.0

    def __post_init__(self) -> None:
        _require_numbers(self, "viewport")
        if not 0 < self.min_scale <= 1 <= self.max_scale:
            raise ConfigError(
                "viewport.min_scale/max_scale",
                (self.min_scale, self.max_scale),
                "Need 0 < min_scale <= 1 <= max_scale",
            )
        if self.zoom_sensitivity <= 0:
            raise ConfigError("viewport.zoom_sensitivity", self.zoom_sensitivity, "Must be positive")
        if self.button_factor <= 1:
            raise ConfigError("viewport.button_factor", self.button_factor, "Must be greater than 1")


@dataclass(frozen=True)
class TimelineConfig:
    """Configuration from [tool.forking-paths] in pyproject.toml."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _build(cls: type, section: dict[str, Any], prefix: str) -> Any:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"{prefix}.{unknown[0]}", section[unknown[0]], f"Unknown key; expected one of {sorted(known)}")
    return cls(**section)


def config_from_dict(section: dict[str, Any]) -> TimelineConfig:
    """Build a TimelineConfig from the parsed ``[tool.forking-paths]`` table."""
    return TimelineConfig(
        layout=_build(LayoutConfig, section.get("layout", {}), "layout"),
        viewport=_build(ViewportConfig, section.get("viewport", {}), "viewport"),
    )


def load_config(start: Path | None = None) -> TimelineConfig:
    """Load [tool.forking-paths] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.forking-paths] section.
    """
    path = find_pyproject(start)
    if path is None:
        return TimelineConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return TimelineConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get(SECTION, {})
    if not section:
        return TimelineConfig()

    return config_from_dict(section)

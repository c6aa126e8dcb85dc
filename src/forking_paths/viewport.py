"""Pan and zoom state for the timeline canvas.

The scene is drawn with ``translate(offset_x, offset_y) scale(scale)`` and
transform origin at the top-left corner, so a scene point ``p`` appears on
screen at ``p * scale + offset``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from forking_paths.config import ViewportConfig
from forking_paths.coordinates import Point
from forking_paths.events import EventDispatcher, ViewportChangedEvent


@dataclass(frozen=True)
class ViewportState:
    """Scale and offset of the rendered scene."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    @property
    def offset(self) -> Point:
        return Point(self.offset_x, self.offset_y)

    @property
    def zoom_percent(self) -> int:
        """Scale as a whole percentage, for the zoom indicator."""
        return round(self.scale * 100)

    def to_screen(self, point: Point) -> Point:
        """Scene -> screen."""
        return Point(point.x * self.scale + self.offset_x, point.y * self.scale + self.offset_y)

    def to_scene(self, point: Point) -> Point:
        """Screen -> scene."""
        return Point((point.x - self.offset_x) / self.scale, (point.y - self.offset_y) / self.scale)

    @property
    def css_transform(self) -> str:
        """Transform for the node and connector layer."""
        return f"translate({self.offset_x:g}px, {self.offset_y:g}px) scale({self.scale:g})"

    @property
    def grid_css_transform(self) -> str:
        """Transform for the background grid: offset only."""
        return f"translate({self.offset_x:g}px, {self.offset_y:g}px)"

    def to_dict(self) -> dict[str, float]:
        return {"scale": self.scale, "offsetX": self.offset_x, "offsetY": self.offset_y}


INITIAL_STATE = ViewportState()


class ViewportEngine:
    """Owns the ViewportState and applies zoom, pan and reset to it.

    Out-of-range zoom requests are clamped, never rejected.

    Example:
        >>> engine = ViewportEngine()
        >>> engine.pan_by(10, -5)
        >>> engine.state
        ViewportState(scale=1.0, offset_x=10.0, offset_y=-5.0)
    """

    def __init__(
        self,
        config: ViewportConfig | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.config = config or ViewportConfig()
        self._dispatcher = dispatcher
        self._state = INITIAL_STATE

    @property
    def state(self) -> ViewportState:
        return self._state

    @property
    def zoom_percent(self) -> int:
        return self._state.zoom_percent

    @property
    def grid_size(self) -> float:
        """Grid cell size on screen at the current scale."""
        return self.config.grid_size * self._state.scale

    def clamp(self, scale: float) -> float:
        return min(max(scale, self.config.min_scale), self.config.max_scale)

    def zoom(self, cursor: Point, wheel_delta: float) -> None:
        """Wheel zoom that keeps the scene point under *cursor* fixed.

        Args:
            cursor: Cursor position relative to the canvas' top-left corner
            wheel_delta: Vertical wheel delta; negative zooms in
        """
        candidate = self._state.scale * (1 + (-wheel_delta) * self.config.zoom_sensitivity)
        self._rescale(self.clamp(candidate), cursor)

    def zoom_in(self, anchor: Point | None = None) -> None:
        """One zoom-button step in."""
        self._rescale(self.clamp(self._state.scale * self.config.button_factor), anchor)

    def zoom_out(self, anchor: Point | None = None) -> None:
        """One zoom-button step out."""
        self._rescale(self.clamp(self._state.scale / self.config.button_factor), anchor)

    def pan_by(self, dx: float, dy: float) -> None:
        """Shift the scene by a screen-space delta. Offsets are unbounded."""
        state = self._state
        self._set(replace(state, offset_x=state.offset_x + dx, offset_y=state.offset_y + dy))

    def reset(self, *, notify: bool = True) -> None:
        """Back to scale 1 at the origin; *notify*=False skips the event."""
        self._set(INITIAL_STATE, notify=notify)

    def _rescale(self, scale: float, anchor: Point | None) -> None:
        state = self._state
        if anchor is None:
            self._set(replace(state, scale=scale))
            return
        ratio = scale / state.scale
        self._set(
            ViewportState(
                scale=scale,
                offset_x=anchor.x - (anchor.x - state.offset_x) * ratio,
                offset_y=anchor.y - (anchor.y - state.offset_y) * ratio,
            )
        )

    def _set(self, state: ViewportState, *, notify: bool = True) -> None:
        self._state = state
        if notify and self._dispatcher is not None:
            self._dispatcher.emit(
                ViewportChangedEvent(scale=state.scale, offset_x=state.offset_x, offset_y=state.offset_y)
            )

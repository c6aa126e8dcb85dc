"""Raw input gestures and the commands they translate to.

A ``GestureController`` turns pointer, wheel and keyboard input into command
objects. It owns only the pan bookkeeping; applying commands to the engines
is the visualizer's job, which keeps every transition testable without a
canvas.
"""

from __future__ import annotations

from dataclasses import dataclass

from forking_paths.coordinates import Point

SPACE = "Space"
RESET_KEY = "0"


# ---------------------------------------------------------------------------
# Gestures (input)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PointerDown:
    """Button press on the canvas; ``node_id`` is set when it hit a node."""

    x: float
    y: float
    node_id: str | None = None


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class PointerLeave:
    """The pointer left the interactive surface."""


@dataclass(frozen=True)
class Wheel:
    """Wheel event at canvas-relative (x, y)."""

    x: float
    y: float
    delta_y: float


@dataclass(frozen=True)
class KeyDown:
    code: str = ""
    key: str = ""
    ctrl: bool = False


@dataclass(frozen=True)
class KeyUp:
    code: str = ""
    key: str = ""
    ctrl: bool = False


@dataclass(frozen=True)
class NodeDragStart:
    """Drag began on a node whose on-screen top-left is (left, top)."""

    node_id: str
    x: float
    y: float
    left: float
    top: float


@dataclass(frozen=True)
class NodeDrag:
    x: float
    y: float


@dataclass(frozen=True)
class NodeDragEnd:
    pass


@dataclass(frozen=True)
class NodeClick:
    node_id: str


@dataclass(frozen=True)
class NodeJumpClick:
    node_id: str


Gesture = (
    PointerDown
    | PointerMove
    | PointerUp
    | PointerLeave
    | Wheel
    | KeyDown
    | KeyUp
    | NodeDragStart
    | NodeDrag
    | NodeDragEnd
    | NodeClick
    | NodeJumpClick
)


# ---------------------------------------------------------------------------
# Commands (output)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ZoomAt:
    cursor: Point
    wheel_delta: float


@dataclass(frozen=True)
class PanBy:
    dx: float
    dy: float


@dataclass(frozen=True)
class ResetView:
    pass


@dataclass(frozen=True)
class StartDrag:
    node_id: str
    grab_point: Point
    node_origin: Point


@dataclass(frozen=True)
class MoveDrag:
    cursor: Point


@dataclass(frozen=True)
class EndDrag:
    pass


@dataclass(frozen=True)
class Navigate:
    node_id: str


@dataclass(frozen=True)
class JumpToTimeline:
    node_id: str


Command = ZoomAt | PanBy | ResetView | StartDrag | MoveDrag | EndDrag | Navigate | JumpToTimeline


@dataclass
class PanState:
    """Pan bookkeeping.

    Attributes:
        panning: A pointer pan is in progress
        pan_mode: Space is held; pointer moves pan without a button
        last_pointer: Pointer position at the previous pan step
        dragging: A node drag is in progress
    """

    panning: bool = False
    pan_mode: bool = False
    last_pointer: Point | None = None
    dragging: bool = False

    @property
    def grabbing(self) -> bool:
        """True when the canvas should show the grab cursor."""
        return self.panning or self.pan_mode


class GestureController:
    """Maps gestures to commands.

    Example:
        >>> gc = GestureController()
        >>> gc.translate(PointerDown(10, 10))
        []
        >>> gc.translate(PointerMove(15, 12))
        [PanBy(dx=5, dy=2)]
    """

    def __init__(self) -> None:
        self.state = PanState()

    def translate(self, gesture: Gesture) -> list[Command]:
        state = self.state

        if isinstance(gesture, PointerDown):
            # Presses on nodes belong to the node (click or drag)
            if gesture.node_id is None:
                state.panning = True
                state.last_pointer = Point(gesture.x, gesture.y)
            return []

        if isinstance(gesture, PointerMove):
            pointer = Point(gesture.x, gesture.y)
            if not (state.panning or state.pan_mode):
                return []
            previous, state.last_pointer = state.last_pointer, pointer
            if previous is None:
                return []
            delta = pointer - previous
            if delta.x == 0 and delta.y == 0:
                return []
            return [PanBy(delta.x, delta.y)]

        if isinstance(gesture, PointerUp):
            state.panning = False
            if not state.pan_mode:
                state.last_pointer = None
            return []

        if isinstance(gesture, PointerLeave):
            state.panning = False
            state.last_pointer = None
            if state.dragging:
                state.dragging = False
                return [EndDrag()]
            return []

        if isinstance(gesture, Wheel):
            return [ZoomAt(Point(gesture.x, gesture.y), gesture.delta_y)]

        if isinstance(gesture, KeyDown):
            if gesture.code == SPACE:
                state.pan_mode = True
                return []
            if gesture.key == RESET_KEY and gesture.ctrl:
                return [ResetView()]
            return []

        if isinstance(gesture, KeyUp):
            if gesture.code == SPACE:
                state.pan_mode = False
                if not state.panning:
                    state.last_pointer = None
            return []

        if isinstance(gesture, NodeDragStart):
            state.dragging = True
            return [
                StartDrag(
                    gesture.node_id,
                    grab_point=Point(gesture.x, gesture.y),
                    node_origin=Point(gesture.left, gesture.top),
                )
            ]

        if isinstance(gesture, NodeDrag):
            if not state.dragging:
                return []
            return [MoveDrag(Point(gesture.x, gesture.y))]

        if isinstance(gesture, NodeDragEnd):
            state.dragging = False
            return [EndDrag()]

        if isinstance(gesture, NodeClick):
            return [Navigate(gesture.node_id)]

        if isinstance(gesture, NodeJumpClick):
            return [JumpToTimeline(gesture.node_id)]

        raise TypeError(f"Unsupported gesture: {type(gesture).__name__}")

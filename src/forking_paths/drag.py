"""Manual repositioning of a single node."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from forking_paths.coordinates import Point
from forking_paths.events import EventDispatcher, NodeMovedEvent
from forking_paths.layout import PositionTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DraggingState:
    """The node being dragged and where on it the pointer grabbed."""

    node_id: str
    grab_offset_x: float
    grab_offset_y: float


class DragController:
    """Overwrites one node's position while a drag is active.

    Starting a drag while another is active replaces it. Manual placement
    always wins: positions written here are never snapped back or pushed
    through collision avoidance.
    """

    def __init__(
        self,
        positions: PositionTable,
        *,
        to_scene: Callable[[Point], Point] | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._positions = positions
        self._to_scene = to_scene
        self._dispatcher = dispatcher
        self._state: DraggingState | None = None

    @property
    def state(self) -> DraggingState | None:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is not None

    def drag_start(self, node_id: str, grab_point: Point, node_origin: Point) -> DraggingState:
        """Begin dragging *node_id*.

        Args:
            node_id: Node under the pointer
            grab_point: Pointer position at drag start
            node_origin: On-screen top-left of the node
        """
        if self._state is not None:
            logger.debug("Drag of %r replaced by drag of %r", self._state.node_id, node_id)
        self._state = DraggingState(
            node_id=node_id,
            grab_offset_x=grab_point.x - node_origin.x,
            grab_offset_y=grab_point.y - node_origin.y,
        )
        return self._state

    def drag_move(self, cursor: Point) -> Point | None:
        """Move the dragged node to *cursor*; return its new position.

        Returns None when no drag is active or the event is the degenerate
        (0, 0) some backends emit mid-gesture.
        """
        if self._state is None:
            return None
        if cursor.is_origin():
            logger.debug("Ignoring degenerate drag event for %r", self._state.node_id)
            return None

        position = self._to_scene(cursor) if self._to_scene is not None else cursor
        self._positions.set(self._state.node_id, position)
        if self._dispatcher is not None:
            self._dispatcher.emit(NodeMovedEvent(node_id=self._state.node_id, x=position.x, y=position.y))
        return position

    def drag_end(self) -> None:
        self._state = None

"""The mounted timeline visualization.

``TimelineVisualizer`` wires a ``DialogueTree`` to the layout, viewport,
active-path and drag engines for the lifetime of one view. It subscribes to
the tree, so adding a node or navigating is enough to keep positions and
highlighting current.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from forking_paths.active_path import ActivePathTracker
from forking_paths.config import TimelineConfig
from forking_paths.drag import DragController
from forking_paths.events import EventDispatcher, TypedEventProcessor
from forking_paths.gestures import (
    Command,
    EndDrag,
    GestureController,
    JumpToTimeline,
    MoveDrag,
    Navigate,
    PanBy,
    ResetView,
    StartDrag,
    ZoomAt,
)
from forking_paths.layout import LayoutEngine, PositionTable
from forking_paths.scene import TimelineScene, build_scene
from forking_paths.viewport import ViewportEngine

if TYPE_CHECKING:
    from forking_paths.coordinates import Point
    from forking_paths.events import (
        CurrentNodeChangedEvent,
        EventProcessor,
        NodeAddedEvent,
    )
    from forking_paths.gestures import Gesture
    from forking_paths.tree import DialogueTree

logger = logging.getLogger(__name__)


class _TreeSync(TypedEventProcessor):
    """Re-syncs the visualizer whenever the tree changes."""

    def __init__(self, visualizer: TimelineVisualizer) -> None:
        self._visualizer = visualizer

    def on_node_added(self, event: NodeAddedEvent) -> None:
        self._visualizer.sync()

    def on_current_node_changed(self, event: CurrentNodeChangedEvent) -> None:
        self._visualizer.sync()


class TimelineVisualizer:
    """Layout, viewport, highlighting and drag state for one dialogue tree.

    Args:
        tree: The node store to visualize
        config: Layout and viewport settings
        processors: Event processors notified of placement, movement,
            viewport and active-path changes
        strict: Propagate processor exceptions instead of logging them

    Example:
        >>> from forking_paths.tree import DialogueTree
        >>> tree = DialogueTree()
        >>> viz = TimelineVisualizer(tree)
        >>> _ = tree.add_node("a", parent_id="root")
        >>> viz.position("a")
        Point(x=800.0, y=300.0)
        >>> viz.close()
    """

    def __init__(
        self,
        tree: DialogueTree,
        *,
        config: TimelineConfig | None = None,
        processors: list[EventProcessor] | None = None,
        strict: bool = False,
    ) -> None:
        self.tree = tree
        self.config = config or TimelineConfig()
        self.dispatcher = EventDispatcher(processors, strict=strict)
        self.positions = PositionTable()
        self.layout = LayoutEngine(self.config.layout, self.dispatcher)
        self.viewport = ViewportEngine(self.config.viewport, self.dispatcher)
        self.active_path = ActivePathTracker(self.dispatcher)
        self.drag = DragController(
            self.positions,
            to_scene=lambda point: self.viewport.state.to_scene(point),
            dispatcher=self.dispatcher,
        )
        self.gestures = GestureController()
        self._sync = _TreeSync(self)
        self._closed = False
        tree.subscribe(self._sync, strict=strict)
        self.sync()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def position(self, node_id: str) -> Point | None:
        return self.positions.get(node_id)

    def sync(self) -> list[str]:
        """Place unplaced nodes and recompute the active path.

        Returns:
            Ids placed by this call
        """
        if self._closed:
            return []
        placed = self.layout.layout_pass(self.tree, self.positions)
        self.active_path.refresh(self.tree)
        return placed

    def scene(self) -> TimelineScene:
        return build_scene(
            self.tree,
            self.positions.snapshot(),
            self.active_path.path,
            self.viewport.state,
            grid_size=self.config.viewport.grid_size,
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle(self, gesture: Gesture) -> list[Command]:
        """Translate *gesture* and apply the resulting commands."""
        commands = self.gestures.translate(gesture)
        for command in commands:
            self.apply(command)
        return commands

    def apply(self, command: Command) -> None:
        if self._closed:
            logger.debug("Ignoring %s after close", type(command).__name__)
            return

        if isinstance(command, ZoomAt):
            self.viewport.zoom(command.cursor, command.wheel_delta)
        elif isinstance(command, PanBy):
            self.viewport.pan_by(command.dx, command.dy)
        elif isinstance(command, ResetView):
            self.viewport.reset()
        elif isinstance(command, StartDrag):
            if command.node_id not in self.tree:
                logger.debug("Ignoring drag of unknown node %r", command.node_id)
                return
            self.drag.drag_start(command.node_id, command.grab_point, command.node_origin)
        elif isinstance(command, MoveDrag):
            self.drag.drag_move(command.cursor)
        elif isinstance(command, EndDrag):
            self.drag.drag_end()
        elif isinstance(command, Navigate):
            self.tree.navigate(command.node_id)
        elif isinstance(command, JumpToTimeline):
            self.tree.jump_to_timeline(command.node_id)
        else:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

    def edit_system_prompt(self, content: str) -> None:
        """Forward the root card's prompt edit to the tree unchanged."""
        self.tree.update_system_prompt(content)

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Unmount: stop listening to the tree and discard all view state."""
        if self._closed:
            return
        self._closed = True
        self.tree.unsubscribe(self._sync)
        self.drag.drag_end()
        self.positions.clear()
        self.viewport.reset(notify=False)
        self.dispatcher.shutdown()

    def __enter__(self) -> TimelineVisualizer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""Event processor base classes."""

from __future__ import annotations

from forking_paths.events.types import (
    ActivePathChangedEvent,
    CurrentNodeChangedEvent,
    Event,
    NodeAddedEvent,
    NodeMovedEvent,
    NodePlacedEvent,
    SystemPromptUpdatedEvent,
    ViewportChangedEvent,
)

_HANDLERS: dict[type, str] = {
    NodeAddedEvent: "on_node_added",
    CurrentNodeChangedEvent: "on_current_node_changed",
    SystemPromptUpdatedEvent: "on_system_prompt_updated",
    NodePlacedEvent: "on_node_placed",
    NodeMovedEvent: "on_node_moved",
    ViewportChangedEvent: "on_viewport_changed",
    ActivePathChangedEvent: "on_active_path_changed",
}


class EventProcessor:
    """Receives every event a tree or visualizer emits.

    Override ``on_event`` for a single catch-all hook, or subclass
    ``TypedEventProcessor`` to get one method per event type.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event."""

    def shutdown(self) -> None:
        """Called once when the visualization unmounts."""


class TypedEventProcessor(EventProcessor):
    """Routes each event to the ``on_*`` method named after its type.

    Subclasses of a known event type route to their parent's handler.
    Event types without a handler are ignored.
    """

    def on_event(self, event: Event) -> None:
        for cls in type(event).__mro__:
            name = _HANDLERS.get(cls)
            if name is not None:
                getattr(self, name)(event)
                return

    def on_node_added(self, event: NodeAddedEvent) -> None: ...
    def on_current_node_changed(self, event: CurrentNodeChangedEvent) -> None: ...
    def on_system_prompt_updated(self, event: SystemPromptUpdatedEvent) -> None: ...
    def on_node_placed(self, event: NodePlacedEvent) -> None: ...
    def on_node_moved(self, event: NodeMovedEvent) -> None: ...
    def on_viewport_changed(self, event: ViewportChangedEvent) -> None: ...
    def on_active_path_changed(self, event: ActivePathChangedEvent) -> None: ...

"""Event system for dialogue tree and timeline engine changes."""

from forking_paths.events.dispatcher import EventDispatcher
from forking_paths.events.processor import EventProcessor, TypedEventProcessor
from forking_paths.events.types import (
    ActivePathChangedEvent,
    BaseEvent,
    CurrentNodeChangedEvent,
    Event,
    NodeAddedEvent,
    NodeMovedEvent,
    NodePlacedEvent,
    SystemPromptUpdatedEvent,
    ViewportChangedEvent,
)

__all__ = [
    "ActivePathChangedEvent",
    "BaseEvent",
    "CurrentNodeChangedEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "NodeAddedEvent",
    "NodeMovedEvent",
    "NodePlacedEvent",
    "SystemPromptUpdatedEvent",
    "TypedEventProcessor",
    "ViewportChangedEvent",
]

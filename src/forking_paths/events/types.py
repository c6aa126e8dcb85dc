"""Event types emitted by the dialogue tree and the timeline engines."""

from __future__ import annotations

import time
from dataclasses import dataclass, field


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all timeline events.

    Attributes:
        timestamp: Unix timestamp when the event was created.
    """

    timestamp: float = field(default_factory=_now, kw_only=True)


@dataclass(frozen=True)
class NodeAddedEvent(BaseEvent):
    """Emitted when the tree gains a node.

    Attributes:
        node_id: Id of the new node.
        parent_id: Id of its parent, or None for the root.
        branch_type: Branch type value of the new node.
    """

    node_id: str = ""
    parent_id: str | None = None
    branch_type: str = "main"


@dataclass(frozen=True)
class CurrentNodeChangedEvent(BaseEvent):
    """Emitted when navigation moves the current node pointer.

    Attributes:
        node_id: The new current node.
        previous_id: The node that was current before.
        via: ``"navigate"`` or ``"jump"``.
    """

    node_id: str = ""
    previous_id: str | None = None
    via: str = "navigate"


@dataclass(frozen=True)
class SystemPromptUpdatedEvent(BaseEvent):
    """Emitted when the root node's content is replaced."""

    content: str = ""


@dataclass(frozen=True)
class NodePlacedEvent(BaseEvent):
    """Emitted when the layout engine assigns a node its first position.

    Attributes:
        node_id: The placed node.
        x: Scene x coordinate.
        y: Scene y coordinate.
        displacements: Number of collision steps taken before settling.
    """

    node_id: str = ""
    x: float = 0.0
    y: float = 0.0
    displacements: int = 0


@dataclass(frozen=True)
class NodeMovedEvent(BaseEvent):
    """Emitted when a drag overwrites a node's position."""

    node_id: str = ""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ViewportChangedEvent(BaseEvent):
    """Emitted after every zoom, pan or reset."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class ActivePathChangedEvent(BaseEvent):
    """Emitted when the recomputed active path differs from the previous one.

    Attributes:
        current_node_id: The node the path leads to.
        node_ids: Every node on the root-to-current chain.
    """

    current_node_id: str = ""
    node_ids: frozenset[str] = frozenset()


Event = (
    NodeAddedEvent
    | CurrentNodeChangedEvent
    | SystemPromptUpdatedEvent
    | NodePlacedEvent
    | NodeMovedEvent
    | ViewportChangedEvent
    | ActivePathChangedEvent
)

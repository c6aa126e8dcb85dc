"""Root-to-current ancestor chain used for highlighting."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from forking_paths.events import ActivePathChangedEvent, EventDispatcher

if TYPE_CHECKING:
    from forking_paths.tree import DialogueNode, DialogueTree


def compute_active_path(current_node_id: str, nodes: Mapping[str, DialogueNode]) -> frozenset[str]:
    """Collect *current_node_id* and all of its ancestors.

    Stops at the root, at the first id that does not resolve, or at an id
    already collected, so a corrupted parent chain still terminates.

    Example:
        >>> from forking_paths.tree import DialogueNode
        >>> nodes = {
        ...     "root": DialogueNode("root"),
        ...     "a": DialogueNode("a", parent_id="root"),
        ... }
        >>> sorted(compute_active_path("a", nodes))
        ['a', 'root']
    """
    path: set[str] = set()
    node = nodes.get(current_node_id)
    while node is not None and node.id not in path:
        path.add(node.id)
        node = nodes.get(node.parent_id) if node.parent_id is not None else None
    return frozenset(path)


def is_connector_active(parent_id: str, child_id: str, path: frozenset[str]) -> bool:
    """A connector is highlighted when both of its endpoints are on the path."""
    return parent_id in path and child_id in path


class ActivePathTracker:
    """Keeps the active path in step with the tree.

    ``refresh`` recomputes from scratch whenever the current node id or the
    tree version differs from the last computation.
    """

    def __init__(self, dispatcher: EventDispatcher | None = None) -> None:
        self._dispatcher = dispatcher
        self._key: tuple[str, int] | None = None
        self._path: frozenset[str] = frozenset()

    @property
    def path(self) -> frozenset[str]:
        return self._path

    def refresh(self, tree: DialogueTree) -> frozenset[str]:
        key = (tree.current_node_id, tree.version)
        if key == self._key:
            return self._path
        self._key = key
        path = compute_active_path(tree.current_node_id, tree.nodes)
        if path != self._path:
            self._path = path
            if self._dispatcher is not None:
                self._dispatcher.emit(
                    ActivePathChangedEvent(current_node_id=tree.current_node_id, node_ids=path)
                )
        return self._path

    def is_active(self, parent_id: str, child_id: str) -> bool:
        return is_connector_active(parent_id, child_id, self._path)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._path

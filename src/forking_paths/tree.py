"""In-memory dialogue tree: the node store the timeline engines read.

Nodes are kept in creation order. A parent is always inserted before any of
its children, so the tree is a valid rooted tree after every insertion.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import networkx as nx

from forking_paths.events import (
    CurrentNodeChangedEvent,
    EventDispatcher,
    EventProcessor,
    NodeAddedEvent,
    SystemPromptUpdatedEvent,
)
from forking_paths.exceptions import TreeConfigError, UnknownNodeError

ROOT_ID = "root"


class BranchType(str, Enum):
    """How a node continues from its parent."""

    MAIN = "main"  # continues the timeline
    ALTERNATE = "alternate"  # forks below
    MERGED = "merged"  # rejoins, slightly above


@dataclass(frozen=True)
class NodeMetadata:
    branch_type: BranchType = BranchType.MAIN
    timestamp: float | None = None

    def __post_init__(self) -> None:
        # Coerce string values to BranchType
        if isinstance(self.branch_type, str) and not isinstance(self.branch_type, BranchType):
            try:
                object.__setattr__(self, "branch_type", BranchType(self.branch_type))
            except ValueError:
                allowed = ", ".join(b.value for b in BranchType)
                raise TreeConfigError(
                    f"Unknown branch type: '{self.branch_type}'\n\n"
                    f"  -> Expected one of: {allowed}"
                ) from None


@dataclass(frozen=True)
class DialogueNode:
    """One turn of the dialogue.

    Attributes:
        id: Unique identifier, stable for the node's lifetime
        parent_id: Parent node id, None only for the root
        content: Message text; the root's content is the system prompt
        metadata: Branch type and optional creation time
    """

    id: str
    parent_id: str | None = None
    content: str = ""
    metadata: NodeMetadata = field(default_factory=NodeMetadata)

    @property
    def branch_type(self) -> BranchType:
        return self.metadata.branch_type

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> dict[str, Any]:
        metadata: dict[str, Any] = {"branchType": self.branch_type.value}
        if self.metadata.timestamp is not None:
            metadata["timestamp"] = self.metadata.timestamp
        data: dict[str, Any] = {"id": self.id, "content": self.content, "metadata": metadata}
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DialogueNode:
        if "id" not in data:
            raise TreeConfigError(f"Node entry without 'id': {dict(data)!r}")
        metadata = data.get("metadata") or {}
        return cls(
            id=str(data["id"]),
            parent_id=data.get("parentId"),
            content=data.get("content", ""),
            metadata=NodeMetadata(
                branch_type=metadata.get("branchType", BranchType.MAIN.value),
                timestamp=metadata.get("timestamp"),
            ),
        )


class DialogueTree:
    """Rooted tree of dialogue nodes with a current-node pointer.

    Mutations emit events to subscribed processors, which is how a mounted
    visualization learns it must lay out new nodes or recompute the active
    path.

    Example:
        >>> tree = DialogueTree()
        >>> _ = tree.add_node("a", parent_id="root")
        >>> tree.navigate("a")
        >>> tree.current_node_id
        'a'
    """

    def __init__(self, system_prompt: str = "") -> None:
        self._nodes: dict[str, DialogueNode] = {}
        self._nx_graph = nx.DiGraph()
        self._explored: set[str] = set()
        self._dispatcher = EventDispatcher()
        self._version = 0
        self._insert(DialogueNode(id=ROOT_ID, content=system_prompt))
        self._current_node_id = ROOT_ID

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> dict[str, DialogueNode]:
        """Map of node id -> node, in creation order."""
        return dict(self._nodes)

    def iter_nodes(self) -> Iterator[DialogueNode]:
        """Iterate over nodes in creation order without copying."""
        return iter(self._nodes.values())

    def get(self, node_id: str) -> DialogueNode | None:
        return self._nodes.get(node_id)

    def __getitem__(self, node_id: str) -> DialogueNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id, len(self._nodes)) from None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> DialogueNode:
        return self._nodes[ROOT_ID]

    @property
    def nx_graph(self) -> nx.DiGraph:
        """Parent -> child edges, children in creation order."""
        return self._nx_graph

    def children(self, node_id: str) -> list[str]:
        """Direct children of *node_id*, in creation order."""
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id, len(self._nodes))
        return list(self._nx_graph.successors(node_id))

    @property
    def current_node_id(self) -> str:
        return self._current_node_id

    @property
    def explored_branches(self) -> frozenset[str]:
        return frozenset(self._explored)

    @property
    def version(self) -> int:
        """Bumped on every change to the node collection."""
        return self._version

    @property
    def system_prompt(self) -> str:
        return self.root.content

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, processor: EventProcessor, *, strict: bool = False) -> None:
        """Notify *processor* of every mutation.

        A failing processor is logged and skipped unless *strict*, in which
        case its exception propagates out of the mutating call.
        """
        self._dispatcher.add(processor, strict=strict)

    def unsubscribe(self, processor: EventProcessor) -> None:
        self._dispatcher.remove(processor)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_node(
        self,
        node_id: str,
        *,
        parent_id: str,
        branch_type: BranchType | str = BranchType.MAIN,
        content: str = "",
        timestamp: float | None = None,
    ) -> DialogueNode:
        """Append a child of *parent_id*.

        Raises:
            TreeConfigError: If the id is taken or the parent does not exist
        """
        node = DialogueNode(
            id=node_id,
            parent_id=parent_id,
            content=content,
            metadata=NodeMetadata(branch_type=branch_type, timestamp=timestamp),
        )
        self._insert(node)
        self._dispatcher.emit(
            NodeAddedEvent(node_id=node.id, parent_id=node.parent_id, branch_type=node.branch_type.value)
        )
        return node

    def navigate(self, node_id: str) -> None:
        """Make *node_id* the current node and mark it explored."""
        self._set_current(node_id, via="navigate")
        self._explored.add(node_id)

    def jump_to_timeline(self, node_id: str) -> None:
        """Make *node_id* current and mark its whole root path explored."""
        self._set_current(node_id, via="jump")
        walk: str | None = node_id
        while walk is not None:
            self._explored.add(walk)
            walk = self._nodes[walk].parent_id

    def update_system_prompt(self, content: str) -> None:
        root = self.root
        self._nodes[ROOT_ID] = DialogueNode(
            id=root.id, parent_id=None, content=content, metadata=root.metadata
        )
        self._dispatcher.emit(SystemPromptUpdatedEvent(content=content))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _insert(self, node: DialogueNode) -> None:
        if node.id in self._nodes:
            raise TreeConfigError(
                f"Duplicate node id: '{node.id}'\n\n"
                f"  -> Node ids must be unique for the tree's lifetime"
            )
        if node.parent_id is None:
            if node.id != ROOT_ID or self._nodes:
                raise TreeConfigError(
                    f"Node '{node.id}' has no parent\n\n"
                    f"  -> Only the single '{ROOT_ID}' node may omit parentId"
                )
        elif node.parent_id not in self._nodes:
            raise TreeConfigError(
                f"Node '{node.id}' references unknown parent '{node.parent_id}'\n\n"
                f"How to fix:\n"
                f"  Insert parents before their children"
            )
        self._nodes[node.id] = node
        self._nx_graph.add_node(node.id)
        if node.parent_id is not None:
            self._nx_graph.add_edge(node.parent_id, node.id)
        self._version += 1

    def _set_current(self, node_id: str, *, via: str) -> None:
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id, len(self._nodes))
        previous = self._current_node_id
        self._current_node_id = node_id
        self._dispatcher.emit(CurrentNodeChangedEvent(node_id=node_id, previous_id=previous, via=via))

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self._nodes.values()],
            "currentNodeId": self._current_node_id,
            "exploredBranches": sorted(self._explored),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DialogueTree:
        """Build a tree from its JSON shape.

        Node entries may appear in any order; they are inserted parents
        first, keeping the listed order among siblings.

        Raises:
            TreeConfigError: If the entries do not form a single rooted tree
        """
        entries = [DialogueNode.from_dict(raw) for raw in data.get("nodes", [])]
        ordered = _parents_first(entries)

        tree = cls()
        for node in ordered:
            if node.id == ROOT_ID:
                tree.update_system_prompt(node.content)
                continue
            tree._insert(node)

        current = data.get("currentNodeId", ROOT_ID)
        if current not in tree:
            raise TreeConfigError(f"currentNodeId '{current}' is not a node of the tree")
        tree._current_node_id = current
        for node_id in data.get("exploredBranches", []):
            if node_id in tree:
                tree._explored.add(node_id)
        return tree


def _parents_first(entries: Iterable[DialogueNode]) -> list[DialogueNode]:
    """Order node entries so every parent precedes its children."""
    by_id: dict[str, DialogueNode] = {}
    for node in entries:
        if node.id in by_id:
            raise TreeConfigError(f"Duplicate node id: '{node.id}'")
        by_id[node.id] = node

    roots = [n.id for n in by_id.values() if n.parent_id is None]
    if roots and roots != [ROOT_ID]:
        raise TreeConfigError(
            f"Expected a single root named '{ROOT_ID}', found: {', '.join(roots)}"
        )

    graph = nx.DiGraph()
    graph.add_nodes_from(by_id)
    for node in by_id.values():
        if node.parent_id is not None:
            if node.parent_id not in by_id and node.parent_id != ROOT_ID:
                raise TreeConfigError(
                    f"Node '{node.id}' references unknown parent '{node.parent_id}'"
                )
            graph.add_edge(node.parent_id, node.id)

    if not nx.is_directed_acyclic_graph(graph):
        cycle = nx.find_cycle(graph)
        path = " -> ".join(edge[0] for edge in cycle)
        raise TreeConfigError(f"Parent chain contains a cycle: {path}")

    # Stable: ties keep listed order
    order = {node_id: index for index, node_id in enumerate(by_id)}
    sorted_ids = nx.lexicographical_topological_sort(graph, key=lambda n: order.get(n, -1))
    return [by_id[node_id] for node_id in sorted_ids if node_id in by_id]

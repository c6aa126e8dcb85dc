"""Automatic placement of dialogue nodes in scene space.

Each node is placed once, relative to its parent, then nudged downward until
it clears every node already placed. Positions are never recomputed by this
module; only a drag may overwrite them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

import networkx as nx

from forking_paths.config import LayoutConfig
from forking_paths.coordinates import Point, overlaps
from forking_paths.events import EventDispatcher, NodePlacedEvent
from forking_paths.tree import ROOT_ID, BranchType

if TYPE_CHECKING:
    from forking_paths.tree import DialogueNode, DialogueTree

logger = logging.getLogger(__name__)


# (dx, dy) in units of (H, V)
BRANCH_OFFSETS: dict[BranchType, tuple[float, float]] = {
    BranchType.MAIN: (1.0, 0.0),
    BranchType.ALTERNATE: (0.5, 1.0),
    BranchType.MERGED: (1.0, -0.3),
}


class PositionTable:
    """Node id -> scene position, in the order positions were first assigned.

    Owned by one mounted visualization: created empty, discarded on unmount.
    """

    def __init__(self, positions: Mapping[str, Point] | None = None) -> None:
        self._positions: dict[str, Point] = dict(positions) if positions else {}

    def get(self, node_id: str) -> Point | None:
        return self._positions.get(node_id)

    def __getitem__(self, node_id: str) -> Point:
        return self._positions[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def items(self):
        return self._positions.items()

    def set(self, node_id: str, position: Point) -> None:
        self._positions[node_id] = position

    def clear(self) -> None:
        self._positions.clear()

    def snapshot(self) -> dict[str, Point]:
        """Copy of the table, safe to keep after further mutation."""
        return dict(self._positions)


def base_position(parent: Point, branch_type: BranchType, config: LayoutConfig) -> Point:
    """Candidate position before collision avoidance.

    Example:
        >>> base_position(Point(400, 300), BranchType.ALTERNATE, LayoutConfig())
        Point(x=600.0, y=600.0)
    """
    unit_x, unit_y = BRANCH_OFFSETS[branch_type]
    return parent.shifted(
        unit_x * config.horizontal_spacing,
        unit_y * config.vertical_spacing,
    )


def displacement_bound(placed_count: int, config: LayoutConfig) -> int:
    """Upper bound on collision steps for a table of *placed_count* nodes.

    A placed node blocks an open window of ``2 * reach_y`` on the y axis,
    which holds at most ``ceil(2 * reach_y / step)`` candidates spaced one
    step apart.
    """
    _, reach_y = config.collision_reach
    per_node = math.ceil(2 * reach_y / config.displacement_step)
    return per_node * placed_count + 1


def resolve_collisions(
    candidate: Point,
    positions: PositionTable,
    config: LayoutConfig,
    exclude: str | None = None,
) -> tuple[Point, int]:
    """Move *candidate* down until it overlaps no placed position.

    Returns:
        (settled position, number of steps taken)
    """
    reach_x, reach_y = config.collision_reach
    step = config.displacement_step
    others = [pos for node_id, pos in positions.items() if node_id != exclude]
    bound = displacement_bound(len(others), config)

    steps = 0
    while any(overlaps(candidate, pos, reach_x, reach_y) for pos in others):
        if steps >= bound:
            logger.warning(
                "Collision bound %d exceeded at (%.1f, %.1f); keeping last candidate",
                bound,
                candidate.x,
                candidate.y,
            )
            break
        candidate = candidate.shifted(dy=step)
        steps += 1
    return candidate, steps


def assign_position(
    node: DialogueNode,
    positions: PositionTable,
    config: LayoutConfig | None = None,
) -> tuple[Point, int] | None:
    """Compute a position for *node* without writing it.

    Returns:
        (position, collision steps), or None when the parent is not placed
        yet and the node must be retried on a later pass
    """
    config = config or LayoutConfig()
    if node.id == ROOT_ID:
        return Point(config.root_x, config.root_y), 0

    parent = positions.get(node.parent_id) if node.parent_id is not None else None
    if parent is None:
        return None

    candidate = base_position(parent, node.branch_type, config)
    return resolve_collisions(candidate, positions, config, exclude=node.id)


def visit_order(tree: DialogueTree, order: str = "bfs") -> list[str]:
    """Node ids in the order a layout pass visits them.

    ``bfs`` walks breadth-first from the root with siblings in creation
    order; ``insertion`` is plain node-collection order.
    """
    if order == "insertion":
        return [node.id for node in tree.iter_nodes()]
    return [ROOT_ID, *(child for _, child in nx.bfs_edges(tree.nx_graph, ROOT_ID))]


class LayoutEngine:
    """Places every node that has no position yet.

    Example:
        >>> from forking_paths.tree import DialogueTree
        >>> tree = DialogueTree()
        >>> _ = tree.add_node("a", parent_id="root")
        >>> table = PositionTable()
        >>> LayoutEngine().layout_pass(tree, table)
        ['root', 'a']
        >>> table["a"]
        Point(x=800.0, y=300.0)
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self._dispatcher = dispatcher

    def layout_pass(self, tree: DialogueTree, positions: PositionTable) -> list[str]:
        """Assign positions to unplaced nodes; return the ids placed.

        Safe to call repeatedly: placed nodes are never revisited, and a node
        whose parent is still unplaced is skipped until a later call.
        """
        placed: list[str] = []
        for node_id in visit_order(tree, self.config.order):
            if node_id in positions:
                continue
            node = tree[node_id]
            result = assign_position(node, positions, self.config)
            if result is None:
                logger.debug("Skipping %r: parent %r has no position yet", node_id, node.parent_id)
                continue
            position, steps = result
            positions.set(node_id, position)
            placed.append(node_id)
            if self._dispatcher is not None:
                self._dispatcher.emit(
                    NodePlacedEvent(node_id=node_id, x=position.x, y=position.y, displacements=steps)
                )
        return placed

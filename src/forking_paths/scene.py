"""Snapshot of everything the presentation layer draws.

These dataclasses are the contract between the timeline engines and a
renderer. Python resolves positions, highlight flags and transforms; the
renderer only draws cards, curves and the grid.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from forking_paths.active_path import is_connector_active
from forking_paths.coordinates import Point

if TYPE_CHECKING:
    from forking_paths.tree import DialogueTree
    from forking_paths.viewport import ViewportState

# Where a node without a position is drawn
UNPLACED = Point(0, 0)


@dataclass(frozen=True)
class SceneNode:
    id: str
    position: Point
    branch_type: str
    is_root: bool
    is_current: bool
    is_explored: bool
    on_active_path: bool
    placed: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.to_dict(),
            "branchType": self.branch_type,
            "isRoot": self.is_root,
            "isCurrent": self.is_current,
            "isExplored": self.is_explored,
            "onActivePath": self.on_active_path,
            "placed": self.placed,
        }


@dataclass(frozen=True)
class SceneConnector:
    """Parent -> child curve endpoints in scene space."""

    parent_id: str
    child_id: str
    start: Point
    end: Point
    branch_type: str
    active: bool

    @property
    def key(self) -> str:
        return f"{self.parent_id}-{self.child_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "source": self.parent_id,
            "target": self.child_id,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "branchType": self.branch_type,
            "active": self.active,
        }


@dataclass(frozen=True)
class TimelineScene:
    nodes: tuple[SceneNode, ...]
    connectors: tuple[SceneConnector, ...]
    viewport: ViewportState
    grid_size: float
    total_nodes: int

    @property
    def zoom_percent(self) -> int:
        return self.viewport.zoom_percent

    @property
    def transform(self) -> str:
        return self.viewport.css_transform

    @property
    def grid_transform(self) -> str:
        return self.viewport.grid_css_transform

    def node(self, node_id: str) -> SceneNode:
        for scene_node in self.nodes:
            if scene_node.id == node_id:
                return scene_node
        raise KeyError(node_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "connectors": [c.to_dict() for c in self.connectors],
            "viewport": self.viewport.to_dict(),
            "transform": self.transform,
            "grid": {"size": self.grid_size, "transform": self.grid_transform},
            "zoomPercent": self.zoom_percent,
            "totalNodes": self.total_nodes,
        }


def build_scene(
    tree: DialogueTree,
    positions: Mapping[str, Point],
    active_path: frozenset[str],
    viewport: ViewportState,
    grid_size: float = 20.0,
) -> TimelineScene:
    """Resolve render data for every node and connector.

    A connector is emitted only when both of its endpoints are placed.

    Args:
        tree: Source of nodes, current node and explored set
        positions: Scene positions by node id
        active_path: Ids on the root-to-current chain
        viewport: Transform to report alongside the scene
        grid_size: Grid cell size at scale 1
    """
    explored = tree.explored_branches
    current = tree.current_node_id

    nodes: list[SceneNode] = []
    connectors: list[SceneConnector] = []
    for node in tree.iter_nodes():
        position = positions.get(node.id)
        nodes.append(
            SceneNode(
                id=node.id,
                position=position or UNPLACED,
                branch_type=node.branch_type.value,
                is_root=node.is_root,
                is_current=node.id == current,
                is_explored=node.id in explored,
                on_active_path=node.id in active_path,
                placed=position is not None,
            )
        )
        if node.parent_id is None:
            continue
        start = positions.get(node.parent_id)
        if start is not None and position is not None:
            connectors.append(
                SceneConnector(
                    parent_id=node.parent_id,
                    child_id=node.id,
                    start=start,
                    end=position,
                    branch_type=node.branch_type.value,
                    active=is_connector_active(node.parent_id, node.id, active_path),
                )
            )

    return TimelineScene(
        nodes=tuple(nodes),
        connectors=tuple(connectors),
        viewport=viewport,
        grid_size=grid_size * viewport.scale,
        total_nodes=len(tree),
    )

"""forking-paths - layout and viewport engine for branching dialogue timelines."""

from forking_paths.active_path import ActivePathTracker, compute_active_path, is_connector_active
from forking_paths.config import LayoutConfig, TimelineConfig, ViewportConfig, load_config
from forking_paths.coordinates import Point
from forking_paths.drag import DragController, DraggingState
from forking_paths.events import (
    ActivePathChangedEvent,
    CurrentNodeChangedEvent,
    EventDispatcher,
    EventProcessor,
    NodeAddedEvent,
    NodeMovedEvent,
    NodePlacedEvent,
    SystemPromptUpdatedEvent,
    TypedEventProcessor,
    ViewportChangedEvent,
)
from forking_paths.exceptions import ConfigError, TreeConfigError, UnknownNodeError
from forking_paths.gestures import GestureController
from forking_paths.layout import LayoutEngine, PositionTable, assign_position
from forking_paths.scene import SceneConnector, SceneNode, TimelineScene, build_scene
from forking_paths.tree import ROOT_ID, BranchType, DialogueNode, DialogueTree
from forking_paths.viewport import ViewportEngine, ViewportState
from forking_paths.visualizer import TimelineVisualizer

__all__ = [
    # Tree
    "ROOT_ID",
    "BranchType",
    "DialogueNode",
    "DialogueTree",
    # Engines
    "LayoutEngine",
    "PositionTable",
    "assign_position",
    "ViewportEngine",
    "ViewportState",
    "ActivePathTracker",
    "compute_active_path",
    "is_connector_active",
    "DragController",
    "DraggingState",
    "GestureController",
    "TimelineVisualizer",
    # Scene
    "Point",
    "SceneConnector",
    "SceneNode",
    "TimelineScene",
    "build_scene",
    # Config
    "LayoutConfig",
    "ViewportConfig",
    "TimelineConfig",
    "load_config",
    # Errors
    "ConfigError",
    "TreeConfigError",
    "UnknownNodeError",
    # Events
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "ActivePathChangedEvent",
    "CurrentNodeChangedEvent",
    "NodeAddedEvent",
    "NodeMovedEvent",
    "NodePlacedEvent",
    "SystemPromptUpdatedEvent",
    "ViewportChangedEvent",
]

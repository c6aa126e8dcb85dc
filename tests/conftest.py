"""Shared fixtures for timeline tests."""

from __future__ import annotations

import pytest

from forking_paths.events import EventProcessor
from forking_paths.tree import DialogueTree


class RecordingProcessor(EventProcessor):
    """Collects every event it receives."""

    def __init__(self) -> None:
        self.events = []
        self.shutdown_calls = 0

    def on_event(self, event) -> None:
        self.events.append(event)

    def shutdown(self) -> None:
        self.shutdown_calls += 1

    def of_type(self, cls):
        return [e for e in self.events if isinstance(e, cls)]


@pytest.fixture
def recorder() -> RecordingProcessor:
    return RecordingProcessor()


@pytest.fixture
def chain_tree() -> DialogueTree:
    """root -> a -> b -> c, all main-line continuations."""
    tree = DialogueTree(system_prompt="You are a helpful assistant.")
    tree.add_node("a", parent_id="root", content="hello")
    tree.add_node("b", parent_id="a", content="hi there")
    tree.add_node("c", parent_id="b", content="how are you?")
    return tree


@pytest.fixture
def branching_tree() -> DialogueTree:
    """root with a main line and two alternate forks.

    root -> a (main) -> b (main)
    root -> alt1 (alternate)
    root -> alt2 (alternate)
    a    -> m (merged)
    """
    tree = DialogueTree()
    tree.add_node("a", parent_id="root")
    tree.add_node("b", parent_id="a")
    tree.add_node("alt1", parent_id="root", branch_type="alternate")
    tree.add_node("alt2", parent_id="root", branch_type="alternate")
    tree.add_node("m", parent_id="a", branch_type="merged")
    return tree

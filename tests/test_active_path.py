"""Tests for active path computation and tracking."""

from __future__ import annotations

from forking_paths.active_path import ActivePathTracker, compute_active_path, is_connector_active
from forking_paths.events import ActivePathChangedEvent, EventDispatcher
from forking_paths.tree import DialogueNode


class TestComputeActivePath:
    def test_leaf_of_chain(self, chain_tree):
        assert compute_active_path("c", chain_tree.nodes) == {"root", "a", "b", "c"}

    def test_inner_node(self, chain_tree):
        assert compute_active_path("a", chain_tree.nodes) == {"root", "a"}

    def test_root_only(self, chain_tree):
        assert compute_active_path("root", chain_tree.nodes) == {"root"}

    def test_sibling_branch_excluded(self, branching_tree):
        path = compute_active_path("alt2", branching_tree.nodes)
        assert path == {"root", "alt2"}
        assert "alt1" not in path

    def test_unknown_current_is_empty(self, chain_tree):
        assert compute_active_path("missing", chain_tree.nodes) == frozenset()

    def test_missing_parent_stops_walk(self):
        nodes = {
            "x": DialogueNode("x", parent_id="gone"),
            "y": DialogueNode("y", parent_id="x"),
        }
        assert compute_active_path("y", nodes) == {"x", "y"}

    def test_cyclic_chain_terminates(self):
        nodes = {
            "p": DialogueNode("p", parent_id="q"),
            "q": DialogueNode("q", parent_id="p"),
        }
        assert compute_active_path("p", nodes) == {"p", "q"}


class TestConnectorActive:
    def test_both_endpoints_required(self):
        path = frozenset({"root", "a"})
        assert is_connector_active("root", "a", path)
        assert not is_connector_active("a", "b", path)
        assert not is_connector_active("root", "alt", path)


class TestActivePathTracker:
    def test_follows_navigation(self, chain_tree):
        tracker = ActivePathTracker()
        assert tracker.refresh(chain_tree) == {"root"}
        chain_tree.navigate("b")
        assert tracker.refresh(chain_tree) == {"root", "a", "b"}
        assert tracker.is_active("a", "b")
        assert not tracker.is_active("b", "c")

    def test_recomputes_when_tree_grows(self, chain_tree):
        tracker = ActivePathTracker()
        chain_tree.navigate("c")
        tracker.refresh(chain_tree)
        chain_tree.add_node("d", parent_id="c")
        chain_tree.navigate("d")
        assert "d" in tracker.refresh(chain_tree)

    def test_emits_only_on_change(self, recorder, chain_tree):
        tracker = ActivePathTracker(EventDispatcher([recorder]))
        tracker.refresh(chain_tree)
        tracker.refresh(chain_tree)
        chain_tree.add_node("side", parent_id="root", branch_type="alternate")
        tracker.refresh(chain_tree)  # tree changed, path did not
        chain_tree.navigate("c")
        tracker.refresh(chain_tree)

        events = recorder.of_type(ActivePathChangedEvent)
        assert [e.current_node_id for e in events] == ["root", "c"]
        assert events[-1].node_ids == {"root", "a", "b", "c"}

    def test_membership(self, chain_tree):
        tracker = ActivePathTracker()
        chain_tree.navigate("a")
        tracker.refresh(chain_tree)
        assert "a" in tracker
        assert "b" not in tracker

"""Tests for manual node repositioning."""

from __future__ import annotations

import logging

from forking_paths.coordinates import Point
from forking_paths.drag import DragController, DraggingState
from forking_paths.events import EventDispatcher, NodeMovedEvent
from forking_paths.layout import LayoutEngine, PositionTable


def _controller(**kwargs) -> tuple[DragController, PositionTable]:
    table = PositionTable({"root": Point(400, 300), "a": Point(800, 300)})
    return DragController(table, **kwargs), table


class TestDragLifecycle:
    def test_start_records_grab_offset(self):
        drag, _ = _controller()
        state = drag.drag_start("a", grab_point=Point(830, 315), node_origin=Point(800, 300))
        assert state == DraggingState(node_id="a", grab_offset_x=30, grab_offset_y=15)
        assert drag.active

    def test_move_overwrites_position(self):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        assert drag.drag_move(Point(120, 80)) == Point(120, 80)
        assert table["a"] == Point(120, 80)

    def test_end_keeps_last_position(self):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        drag.drag_move(Point(10, 20))
        drag.drag_move(Point(30, 40))
        drag.drag_end()
        assert not drag.active
        assert drag.state is None
        assert table["a"] == Point(30, 40)

    def test_move_without_drag_is_ignored(self):
        drag, table = _controller()
        assert drag.drag_move(Point(1, 1)) is None
        assert table["a"] == Point(800, 300)

    def test_no_collision_avoidance_for_manual_placement(self):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        drag.drag_move(Point(401, 301))
        drag.drag_end()
        assert table["a"] == Point(401, 301)


class TestDegenerateEvents:
    def test_origin_event_ignored(self, caplog):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        drag.drag_move(Point(50, 60))
        with caplog.at_level(logging.DEBUG, logger="forking_paths.drag"):
            assert drag.drag_move(Point(0, 0)) is None
        assert table["a"] == Point(50, 60)
        assert "degenerate" in caplog.text

    def test_axis_zero_is_not_degenerate(self):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        drag.drag_move(Point(0, 75))
        assert table["a"] == Point(0, 75)


class TestDragPolicy:
    def test_new_drag_replaces_active_drag(self):
        drag, table = _controller()
        drag.drag_start("a", Point(800, 300), Point(800, 300))
        drag.drag_start("root", Point(400, 300), Point(390, 290))
        assert drag.state.node_id == "root"
        drag.drag_move(Point(5, 5))
        assert table["root"] == Point(5, 5)
        assert table["a"] == Point(800, 300)


class TestSceneConversion:
    def test_cursor_converted_to_scene(self):
        drag, table = _controller(to_scene=lambda p: Point(p.x / 2, p.y / 2))
        drag.drag_start("a", Point(0, 0), Point(0, 0))
        drag.drag_move(Point(100, 50))
        assert table["a"] == Point(50, 25)

    def test_degenerate_filter_applies_to_raw_cursor(self):
        drag, table = _controller(to_scene=lambda p: Point(p.x - 10, p.y - 10))
        drag.drag_start("a", Point(0, 0), Point(0, 0))
        drag.drag_move(Point(10, 10))  # scene (0, 0) is a real position
        assert table["a"] == Point(0, 0)


class TestManualOverridePersistence:
    def test_survives_later_layout_passes(self, chain_tree):
        table = PositionTable()
        engine = LayoutEngine()
        engine.layout_pass(chain_tree, table)

        drag = DragController(table)
        drag.drag_start("b", Point(1200, 300), Point(1200, 300))
        drag.drag_move(Point(-250, 900))
        drag.drag_end()

        chain_tree.add_node("x", parent_id="root", branch_type="alternate")
        chain_tree.add_node("y", parent_id="a", branch_type="merged")
        engine.layout_pass(chain_tree, table)
        assert table["b"] == Point(-250, 900)

    def test_emits_moved_events(self, recorder):
        drag, _ = _controller(dispatcher=EventDispatcher([recorder]))
        drag.drag_start("a", Point(0, 0), Point(0, 0))
        drag.drag_move(Point(7, 8))
        drag.drag_move(Point(0, 0))
        events = recorder.of_type(NodeMovedEvent)
        assert len(events) == 1
        assert (events[0].node_id, events[0].x, events[0].y) == ("a", 7, 8)

"""Tests for the pan/zoom viewport."""

from __future__ import annotations

import pytest

from forking_paths.config import ViewportConfig
from forking_paths.coordinates import Point
from forking_paths.events import EventDispatcher, ViewportChangedEvent
from forking_paths.viewport import ViewportEngine, ViewportState

EPSILON = 1e-9


class TestViewportState:
    def test_initial(self):
        assert ViewportState() == ViewportState(scale=1.0, offset_x=0.0, offset_y=0.0)

    def test_screen_scene_round_trip(self):
        state = ViewportState(scale=2.0, offset_x=10, offset_y=-20)
        assert state.to_screen(Point(5, 5)) == Point(20, -10)
        assert state.to_scene(Point(20, -10)) == Point(5, 5)

    def test_css_transform(self):
        state = ViewportState(scale=1.5, offset_x=12, offset_y=-4.5)
        assert state.css_transform == "translate(12px, -4.5px) scale(1.5)"

    def test_grid_transform_is_offset_only(self):
        state = ViewportState(scale=2.5, offset_x=3, offset_y=4)
        assert state.grid_css_transform == "translate(3px, 4px)"

    def test_zoom_percent_rounds(self):
        assert ViewportState(scale=1.234).zoom_percent == 123
        assert ViewportState(scale=0.1).zoom_percent == 10


class TestZoom:
    @pytest.mark.parametrize("cursor", [Point(300, 200), Point(0, 0), Point(-50, 1234.5)])
    @pytest.mark.parametrize("delta", [-100, 250, -3000])
    def test_point_under_cursor_stays_fixed(self, cursor, delta):
        engine = ViewportEngine()
        engine.pan_by(37, -11)
        before = engine.state.to_scene(cursor)
        engine.zoom(cursor, delta)
        after = engine.state.to_scene(cursor)
        assert abs(before.x - after.x) < 1e-6
        assert abs(before.y - after.y) < 1e-6

    def test_negative_delta_zooms_in(self):
        engine = ViewportEngine()
        engine.zoom(Point(0, 0), -100)
        assert engine.state.scale == pytest.approx(1.1)

    def test_offsets_follow_cursor_formula(self):
        engine = ViewportEngine()
        engine.zoom(Point(300, 200), -100)
        assert engine.state.offset_x == pytest.approx(300 - 300 * 1.1)
        assert engine.state.offset_y == pytest.approx(200 - 200 * 1.1)

    def test_repeated_zoom_in_clamps_at_max(self):
        engine = ViewportEngine()
        for _ in range(50):
            engine.zoom(Point(100, 100), -1000)
            assert engine.state.scale <= 3.0
        assert engine.state.scale == 3.0

    def test_repeated_zoom_out_clamps_at_min(self):
        engine = ViewportEngine()
        for _ in range(50):
            engine.zoom(Point(100, 100), 900)
            assert engine.state.scale >= 0.1
        assert engine.state.scale == pytest.approx(0.1)

    def test_overshooting_delta_is_clamped_not_rejected(self):
        engine = ViewportEngine()
        engine.zoom(Point(0, 0), 5000)  # 1 * (1 - 5) is negative
        assert engine.state.scale == pytest.approx(0.1)

    def test_zoom_at_limit_keeps_offsets(self):
        engine = ViewportEngine()
        engine.zoom(Point(0, 0), -5000)
        engine.pan_by(20, 30)
        engine.zoom(Point(400, 400), -100)
        assert engine.state == ViewportState(scale=3.0, offset_x=20, offset_y=30)

    def test_custom_limits(self):
        engine = ViewportEngine(ViewportConfig(min_scale=0.5, max_scale=2.0))
        engine.zoom(Point(0, 0), -5000)
        assert engine.state.scale == 2.0


class TestZoomButtons:
    def test_zoom_in_multiplies(self):
        engine = ViewportEngine()
        engine.zoom_in()
        assert engine.state.scale == pytest.approx(1.2)
        assert engine.zoom_percent == 120

    def test_zoom_out_divides(self):
        engine = ViewportEngine()
        engine.zoom_out()
        assert engine.state.scale == pytest.approx(1 / 1.2)

    def test_buttons_keep_offsets_without_anchor(self):
        engine = ViewportEngine()
        engine.pan_by(50, 60)
        engine.zoom_in()
        assert (engine.state.offset_x, engine.state.offset_y) == (50, 60)

    def test_buttons_clamp(self):
        engine = ViewportEngine()
        for _ in range(20):
            engine.zoom_in()
        assert engine.state.scale == 3.0
        for _ in range(40):
            engine.zoom_out()
        assert engine.state.scale == 0.1

    def test_anchored_button_keeps_anchor_fixed(self):
        engine = ViewportEngine()
        anchor = Point(640, 360)
        before = engine.state.to_scene(anchor)
        engine.zoom_in(anchor)
        after = engine.state.to_scene(anchor)
        assert before.x == pytest.approx(after.x)
        assert before.y == pytest.approx(after.y)


class TestPanAndReset:
    def test_pan_accumulates(self):
        engine = ViewportEngine()
        engine.pan_by(10, 5)
        engine.pan_by(-3, 7)
        assert engine.state == ViewportState(scale=1.0, offset_x=7, offset_y=12)

    def test_pan_is_unbounded(self):
        engine = ViewportEngine()
        engine.pan_by(-1e7, 1e7)
        assert engine.state.offset_x == -1e7

    def test_pan_does_not_touch_scale(self):
        engine = ViewportEngine()
        engine.zoom_in()
        engine.pan_by(1, 1)
        assert engine.state.scale == pytest.approx(1.2)

    def test_reset_from_any_state(self):
        engine = ViewportEngine()
        engine.zoom(Point(123, 45), -700)
        engine.pan_by(-999, 321)
        engine.reset()
        assert engine.state == ViewportState(scale=1, offset_x=0, offset_y=0)

    def test_grid_size_scales(self):
        engine = ViewportEngine()
        engine.zoom_in()
        assert engine.grid_size == pytest.approx(24)


class TestViewportEvents:
    def test_every_change_emits(self, recorder):
        engine = ViewportEngine(dispatcher=EventDispatcher([recorder]))
        engine.zoom(Point(0, 0), -100)
        engine.pan_by(5, 5)
        engine.reset()
        events = recorder.of_type(ViewportChangedEvent)
        assert len(events) == 3
        assert events[-1].scale == 1.0
        assert events[1].offset_x == pytest.approx(5)

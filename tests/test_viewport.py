"""Tests for the pan/zoom transform."""

import pytest

from mindcanvas.config import ViewSettings
from mindcanvas.geometry import Point, ORIGIN
from mindcanvas.viewport import Viewport


class TestTransform:
    """Test screen and canvas conversion."""

    def test_initial_state(self):
        """Test the initial zoom and offset."""
        viewport = Viewport()
        assert viewport.scale == pytest.approx(0.9)
        assert viewport.offset == ORIGIN

    def test_to_screen(self):
        """Test canvas to screen applies scale then offset."""
        viewport = Viewport()
        viewport.set_scale(2.0)
        viewport.pan_to(Point(100, 50))
        assert viewport.to_screen(Point(10, 20)) == Point(120, 90)

    def test_to_canvas(self):
        """Test screen to canvas undoes offset then scale."""
        viewport = Viewport()
        viewport.set_scale(2.0)
        viewport.pan_to(Point(100, 50))
        assert viewport.to_canvas(120, 90) == Point(10, 20)

    def test_inverse_at_odd_scale(self):
        """Test both directions agree at a non-trivial zoom."""
        viewport = Viewport()
        viewport.pan_to(Point(-37.5, 412.0))
        screen = viewport.to_screen(Point(-81.25, 3.5))
        p = viewport.to_canvas(screen.x, screen.y)
        assert p.x == pytest.approx(-81.25)
        assert p.y == pytest.approx(3.5)


class TestZoom:
    """Test zoom steps and limits."""

    def test_zoom_in_step(self):
        """Test one step in."""
        viewport = Viewport()
        assert viewport.zoom_in()
        assert viewport.scale == pytest.approx(1.0)

    def test_zoom_out_step(self):
        """Test one step out."""
        viewport = Viewport()
        assert viewport.zoom_out()
        assert viewport.scale == pytest.approx(0.8)

    def test_upper_limit(self):
        """Test zooming in stops at the maximum."""
        viewport = Viewport()
        for _ in range(100):
            viewport.zoom_in()
        assert viewport.scale == pytest.approx(2.5)
        assert not viewport.zoom_in()

    def test_lower_limit(self):
        """Test zooming out stops at the minimum."""
        viewport = Viewport()
        for _ in range(100):
            viewport.zoom_out()
        assert viewport.scale == pytest.approx(0.2)
        assert not viewport.zoom_out()

    def test_set_scale_clamps(self):
        """Test explicit scales are clamped."""
        viewport = Viewport()
        viewport.set_scale(40.0)
        assert viewport.scale == 2.5
        viewport.set_scale(-1.0)
        assert viewport.scale == 0.2

    def test_initial_scale_clamped(self):
        """Test an out of range initial zoom is clamped."""
        viewport = Viewport(ViewSettings(initial_scale=9.0))
        assert viewport.scale == 2.5

    def test_zoom_keeps_offset(self):
        """Test zooming does not move the offset."""
        viewport = Viewport()
        viewport.pan_to(Point(30, 40))
        viewport.zoom_in()
        assert viewport.offset == Point(30, 40)


class TestReset:
    """Test returning to the initial view."""

    def test_reset_to_center(self):
        """Test reset restores zoom and centres the origin."""
        viewport = Viewport()
        viewport.zoom_in()
        viewport.pan_to(Point(5, 5))
        viewport.reset(Point(400, 300))
        assert viewport.scale == pytest.approx(0.9)
        assert viewport.offset == Point(400, 300)

    def test_reset_without_center(self):
        """Test reset with no centre puts the origin at the corner."""
        viewport = Viewport()
        viewport.pan_to(Point(5, 5))
        viewport.reset()
        assert viewport.offset == ORIGIN

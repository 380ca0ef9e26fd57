"""Pan/zoom state and the screen <-> canvas transform."""

from typing import Optional

from mindcanvas.config import ViewSettings
from mindcanvas.geometry import Point, ORIGIN


class Viewport:
    """Canvas view state.

    A canvas point maps to the screen as ``screen = canvas * scale + offset``.
    """

    def __init__(self, settings: Optional[ViewSettings] = None):
        self.settings = settings or ViewSettings()
        self.scale = self._clamp(self.settings.initial_scale)
        self.offset = ORIGIN

    def _clamp(self, scale: float) -> float:
        return max(self.settings.min_scale, min(self.settings.max_scale, scale))

    def to_canvas(self, sx: float, sy: float) -> Point:
        """Convert screen coordinates to canvas coordinates."""
        return Point((sx - self.offset.x) / self.scale,
                     (sy - self.offset.y) / self.scale)

    def to_screen(self, point: Point) -> Point:
        """Convert a canvas point to screen coordinates."""
        return Point(point.x * self.scale + self.offset.x,
                     point.y * self.scale + self.offset.y)

    def set_scale(self, scale: float) -> bool:
        """Set the zoom level, clamped; True if it changed."""
        new_scale = self._clamp(scale)
        if new_scale == self.scale:
            return False
        self.scale = new_scale
        return True

    def zoom_in(self) -> bool:
        """Increase zoom level by one step."""
        return self.set_scale(self.scale + self.settings.zoom_step)

    def zoom_out(self) -> bool:
        """Decrease zoom level by one step."""
        return self.set_scale(self.scale - self.settings.zoom_step)

    def pan_to(self, offset: Point):
        self.offset = offset

    def reset(self, center: Optional[Point] = None):
        """Back to the initial zoom, with `center` as the screen origin."""
        self.scale = self._clamp(self.settings.initial_scale)
        self.offset = center if center is not None else ORIGIN

"""Pointer interaction: dragging a node or panning the canvas."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable

from mindcanvas.geometry import Point, PointerTarget
from mindcanvas.positions import PositionMap
from mindcanvas.viewport import Viewport

logger = logging.getLogger(__name__)


class InteractionMode(Enum):
    """What ongoing pointer movement means."""
    IDLE = "idle"
    PANNING = "panning"
    DRAGGING_NODE = "dragging_node"


@dataclass(frozen=True)
class DragState:
    node_id: str
    grab_offset: Point  # canvas vector from node position to the first hit


@dataclass(frozen=True)
class PanState:
    anchor: Point  # screen pointer minus offset at pan start


class InteractionController:
    """Single owner of the current interaction mode.

    Drag and pan are mutually exclusive and can only start from IDLE.
    Release or leaving the surface always returns to IDLE.
    """

    def __init__(self, positions: PositionMap, viewport: Viewport):
        self.positions = positions
        self.viewport = viewport
        self._drag: Optional[DragState] = None
        self._pan: Optional[PanState] = None

        # Callbacks
        self.on_mode_changed: Optional[Callable[[InteractionMode], None]] = None

    @property
    def mode(self) -> InteractionMode:
        if self._drag is not None:
            return InteractionMode.DRAGGING_NODE
        if self._pan is not None:
            return InteractionMode.PANNING
        return InteractionMode.IDLE

    @property
    def dragged_id(self) -> Optional[str]:
        return self._drag.node_id if self._drag else None

    @property
    def grab_offset(self) -> Optional[Point]:
        return self._drag.grab_offset if self._drag else None

    # ==================== Pointer events ====================

    def pointer_down(self, target: PointerTarget, sx: float, sy: float,
                     node_id: Optional[str] = None) -> bool:
        """Start a drag or a pan; True if the mode changed."""
        if self.mode is not InteractionMode.IDLE:
            return False

        if target is PointerTarget.NODE_BODY:
            return self._start_drag(node_id, sx, sy)
        if target is PointerTarget.BACKGROUND:
            self._pan = PanState(anchor=Point(sx, sy) - self.viewport.offset)
            self._notify_mode()
            return True

        # Label field and action buttons never start a gesture
        return False

    def _start_drag(self, node_id: Optional[str], sx: float, sy: float) -> bool:
        if node_id is None:
            return False
        position = self.positions.get(node_id)
        if position is None:
            logger.debug("Drag start on %r ignored, node has no position", node_id)
            return False

        pointer = self.viewport.to_canvas(sx, sy)
        self._drag = DragState(node_id=node_id, grab_offset=pointer - position)
        self._notify_mode()
        return True

    def pointer_move(self, sx: float, sy: float) -> bool:
        """Apply pointer movement; True if a position or the offset changed."""
        if self._drag is not None:
            node_id = self._drag.node_id
            if node_id not in self.positions:
                return False
            pointer = self.viewport.to_canvas(sx, sy)
            self.positions.set(node_id, pointer - self._drag.grab_offset)
            return True

        if self._pan is not None:
            self.viewport.pan_to(Point(sx, sy) - self._pan.anchor)
            return True

        return False

    def pointer_up(self) -> bool:
        """End any drag or pan where it is."""
        if self.mode is InteractionMode.IDLE:
            return False
        self._drag = None
        self._pan = None
        self._notify_mode()
        return True

    def pointer_leave(self) -> bool:
        """Leaving the surface counts as a release."""
        return self.pointer_up()

    # ==================== Zoom ====================

    def wheel(self, dy: float, modifier: bool) -> bool:
        """Zoom on wheel with the modifier held; True if handled."""
        if not modifier or dy == 0:
            return False
        if dy > 0:
            self.viewport.zoom_out()
        else:
            self.viewport.zoom_in()
        return True

    def _notify_mode(self):
        if self.on_mode_changed:
            self.on_mode_changed(self.mode)

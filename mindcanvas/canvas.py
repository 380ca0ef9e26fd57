"""Canvas widget for rendering the mindmap and feeding pointer input to the engine."""

import logging
import math
from typing import Optional, Callable

import gi

gi.require_version("Gtk", "4.0")
gi.require_version("Gdk", "4.0")
gi.require_version("Adw", "1")
from gi.repository import Gtk, Gdk, Adw

import cairo

from mindcanvas.engine import MindMapEngine, RenderedNode
from mindcanvas.geometry import Point, PointerTarget, NodeAction
from mindcanvas.interaction import InteractionMode

logger = logging.getLogger(__name__)


def _hex(color: str):
    color = color.lstrip('#')
    return tuple(int(color[i:i + 2], 16) / 255 for i in (0, 2, 4))


class MindMapCanvas(Gtk.DrawingArea):
    """Draws nodes and connections and routes pointer events to the engine."""

    COLORS = {
        'bg_top': _hex('#0f172a'),
        'bg_bottom': _hex('#1e293b'),
        'grid_dots': (0.58, 0.64, 0.72),
        'line_start': _hex('#64748b'),
        'line_end': _hex('#94a3b8'),
        'text': (1.0, 1.0, 1.0),
        'add_button': _hex('#22c55e'),
        'delete_button': _hex('#ef4444'),
        'button_border': (1.0, 1.0, 1.0),
    }

    # Fill per depth; deeper levels reuse the last colour
    LEVEL_COLORS = [
        (_hex('#2563eb'), _hex('#1e40af')),
        (_hex('#6366f1'), _hex('#4338ca')),
        (_hex('#a855f7'), _hex('#7e22ce')),
        (_hex('#ec4899'), _hex('#be185d')),
        (_hex('#fb7185'), _hex('#e11d48')),
        (_hex('#fb923c'), _hex('#ea580c')),
        (_hex('#fbbf24'), _hex('#d97706')),
    ]

    GRID_SIZE = 20
    CORNER_RADIUS = 12

    def __init__(self, engine: MindMapEngine):
        super().__init__()

        self.engine = engine
        self.hovered_id: Optional[str] = None
        self._centered = False
        self._drag_start_x = 0.0
        self._drag_start_y = 0.0

        # Callbacks
        self.on_view_changed: Optional[Callable[[float], None]] = None

        self.engine.on_changed = self._on_engine_changed
        self.engine.interaction.on_mode_changed = self._on_mode_changed

        self.set_draw_func(self._on_draw)
        self.set_focusable(True)
        self.set_hexpand(True)
        self.set_vexpand(True)

        self._setup_event_controllers()
        self._update_cursor(InteractionMode.IDLE)

    def _setup_event_controllers(self):
        """Setup mouse event controllers."""
        # Press/move/release for node drag and canvas pan
        drag_ctrl = Gtk.GestureDrag()
        drag_ctrl.set_button(1)
        drag_ctrl.connect("drag-begin", self._on_drag_begin)
        drag_ctrl.connect("drag-update", self._on_drag_update)
        drag_ctrl.connect("drag-end", self._on_drag_end)
        self.add_controller(drag_ctrl)

        # Clicks for action buttons and label editing
        click_ctrl = Gtk.GestureClick()
        click_ctrl.set_button(1)
        click_ctrl.connect("pressed", self._on_click)
        click_ctrl.connect("released", self._on_click_released)
        self.add_controller(click_ctrl)

        motion_ctrl = Gtk.EventControllerMotion()
        motion_ctrl.connect("motion", self._on_motion)
        motion_ctrl.connect("leave", self._on_leave)
        self.add_controller(motion_ctrl)

        scroll_ctrl = Gtk.EventControllerScroll()
        scroll_ctrl.set_flags(Gtk.EventControllerScrollFlags.VERTICAL)
        scroll_ctrl.connect("scroll", self._on_scroll)
        self.add_controller(scroll_ctrl)

    # ==================== Engine hooks ====================

    def _on_engine_changed(self):
        if self.hovered_id is not None and self.hovered_id not in self.engine.tree:
            self.hovered_id = None
        self._notify_view_changed()
        self.queue_draw()

    def _on_mode_changed(self, mode: InteractionMode):
        self._update_cursor(mode)
        self.queue_draw()

    def _update_cursor(self, mode: InteractionMode):
        name = "grab" if mode is InteractionMode.IDLE else "grabbing"
        self.set_cursor(Gdk.Cursor.new_from_name(name, None))

    def _notify_view_changed(self):
        if self.on_view_changed:
            self.on_view_changed(self.engine.scale)

    def _widget_center(self) -> Point:
        return Point(self.get_width() / 2, self.get_height() / 2)

    # ==================== Drawing ====================

    def _on_draw(self, area, cr, width, height):
        """Main drawing function."""
        if not self._centered and width > 0 and height > 0:
            # First frame: put the canvas origin in the middle of the widget
            self.engine.viewport.pan_to(Point(width / 2, height / 2))
            self._centered = True

        cr.save()
        self._draw_background(cr, width, height)
        self._draw_grid(cr, width, height)

        offset = self.engine.offset
        cr.translate(offset.x, offset.y)
        cr.scale(self.engine.scale, self.engine.scale)

        for segment in self.engine.segments():
            self._draw_segment(cr, segment.start, segment.end)

        dragged = self.engine.dragged_id
        nodes = self.engine.nodes()
        for rendered in nodes:
            if rendered.id != dragged:
                self._draw_node(cr, rendered)
        for rendered in nodes:
            if rendered.id == dragged:
                self._draw_node(cr, rendered)

        cr.restore()

    def _draw_background(self, cr, width: float, height: float):
        gradient = cairo.LinearGradient(0, 0, 0, height)
        gradient.add_color_stop_rgb(0, *self.COLORS['bg_top'])
        gradient.add_color_stop_rgb(1, *self.COLORS['bg_bottom'])
        cr.set_source(gradient)
        cr.paint()

    def _draw_grid(self, cr, width: float, height: float):
        """Draw dot grid pattern that follows the pan offset."""
        cr.save()
        cr.set_source_rgba(*self.COLORS['grid_dots'], 0.06)

        offset = self.engine.offset
        x = offset.x % self.GRID_SIZE
        while x < width:
            y = offset.y % self.GRID_SIZE
            while y < height:
                cr.arc(x, y, 1, 0, 2 * math.pi)
                cr.fill()
                y += self.GRID_SIZE
            x += self.GRID_SIZE

        cr.restore()

    def _draw_segment(self, cr, start: Point, end: Point):
        gradient = cairo.LinearGradient(start.x, start.y, end.x, end.y)
        gradient.add_color_stop_rgb(0, *self.COLORS['line_start'])
        gradient.add_color_stop_rgb(1, *self.COLORS['line_end'])
        cr.set_source(gradient)
        cr.set_line_width(3)
        cr.set_line_cap(cairo.LINE_CAP_ROUND)
        cr.move_to(start.x, start.y)
        cr.line_to(end.x, end.y)
        cr.stroke()

    def _draw_node(self, cr, rendered: RenderedNode):
        """Draw a single node."""
        regions = self.engine.regions_for(rendered)
        box = regions.box
        is_dragging = rendered.id == self.engine.dragged_id
        is_hovered = rendered.id == self.hovered_id and not is_dragging
        fill, border = self.LEVEL_COLORS[min(rendered.level, len(self.LEVEL_COLORS) - 1)]

        cr.save()

        # Shadow, stronger while dragged
        shadow = 8 if is_dragging else 3
        self._draw_rounded_rect(cr, box.x, box.y + shadow, box.width, box.height,
                                self.CORNER_RADIUS)
        cr.set_source_rgba(0, 0, 0, 0.35 if is_dragging else 0.2)
        cr.fill()

        # Bottom border, then the face on top of it
        self._draw_rounded_rect(cr, box.x, box.y, box.width, box.height, self.CORNER_RADIUS)
        cr.set_source_rgb(*border)
        cr.fill()
        self._draw_rounded_rect(cr, box.x, box.y, box.width, box.height - 4, self.CORNER_RADIUS)
        cr.set_source_rgba(*fill, 0.9 if is_dragging else 1.0)
        cr.fill()

        if is_hovered:
            self._draw_grip(cr, box.x + 6, box.y + box.height / 2)

        # Label
        cr.set_source_rgb(*self.COLORS['text'])
        cr.select_font_face("Sans", cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_BOLD)
        cr.set_font_size(14)
        text = rendered.label
        extents = cr.text_extents(text)
        max_width = regions.text.width
        while extents.width > max_width and len(text) > 3:
            text = text[:-4] + "..."
            extents = cr.text_extents(text)
        cr.move_to(box.x + box.width / 2 - extents.width / 2 - extents.x_bearing,
                   box.y + box.height / 2 - extents.height / 2 - extents.y_bearing)
        cr.show_text(text)

        if is_hovered:
            self._draw_button(cr, regions.add_button.center, regions.add_button.radius,
                              self.COLORS['add_button'], plus=True)
            if regions.delete_button is not None:
                self._draw_button(cr, regions.delete_button.center,
                                  regions.delete_button.radius,
                                  self.COLORS['delete_button'], plus=False)

        cr.restore()

    def _draw_grip(self, cr, x: float, y: float):
        cr.set_source_rgba(1, 1, 1, 0.6)
        for dx in (0, 4):
            for dy in (-4, 0, 4):
                cr.arc(x + dx, y + dy, 1, 0, 2 * math.pi)
                cr.fill()

    def _draw_button(self, cr, center: Point, radius: float, color, plus: bool):
        cr.arc(center.x, center.y, radius, 0, 2 * math.pi)
        cr.set_source_rgb(*color)
        cr.fill_preserve()
        cr.set_source_rgba(*self.COLORS['button_border'], 0.8)
        cr.set_line_width(2)
        cr.stroke()

        arm = radius * 0.45
        cr.set_source_rgb(*self.COLORS['text'])
        cr.set_line_width(2)
        cr.set_line_cap(cairo.LINE_CAP_ROUND)
        if plus:
            cr.move_to(center.x - arm, center.y)
            cr.line_to(center.x + arm, center.y)
            cr.move_to(center.x, center.y - arm)
            cr.line_to(center.x, center.y + arm)
        else:
            cr.move_to(center.x - arm, center.y - arm)
            cr.line_to(center.x + arm, center.y + arm)
            cr.move_to(center.x + arm, center.y - arm)
            cr.line_to(center.x - arm, center.y + arm)
        cr.stroke()

    def _draw_rounded_rect(self, cr, x: float, y: float, w: float, h: float, radius: float):
        """Draw a rounded rectangle path."""
        cr.new_path()
        cr.arc(x + w - radius, y + radius, radius, -math.pi / 2, 0)
        cr.arc(x + w - radius, y + h - radius, radius, 0, math.pi / 2)
        cr.arc(x + radius, y + h - radius, radius, math.pi / 2, math.pi)
        cr.arc(x + radius, y + radius, radius, math.pi, 3 * math.pi / 2)
        cr.close_path()

    # ==================== Pointer input ====================

    def _on_drag_begin(self, gesture, start_x, start_y):
        """Pointer down: either grab a node or start panning."""
        self.grab_focus()
        self._drag_start_x = start_x
        self._drag_start_y = start_y
        target, node_id = self.engine.hit_test(start_x, start_y)
        self.engine.pointer_down(target, start_x, start_y, node_id)

    def _on_drag_update(self, gesture, offset_x, offset_y):
        """Pointer moved with the button held."""
        if self.engine.pointer_move(self._drag_start_x + offset_x,
                                    self._drag_start_y + offset_y):
            self.queue_draw()

    def _on_drag_end(self, gesture, offset_x, offset_y):
        """Pointer released."""
        self.engine.pointer_up()
        self.queue_draw()

    def _on_click(self, gesture, n_press, x, y):
        """Double-click on a label opens the rename dialog."""
        if n_press != 2:
            return
        target, node_id = self.engine.hit_test(x, y)
        if target is PointerTarget.NODE_TEXT and node_id is not None:
            self.prompt_rename(node_id)

    def _on_click_released(self, gesture, n_press, x, y):
        """Trigger the action button under the pointer."""
        hit = self.engine.action_at(x, y)
        if hit is None:
            return
        action, node_id = hit
        logger.debug("Action %s on %r", action.value, node_id)
        if action is NodeAction.ADD_CHILD:
            self.engine.add_child(node_id)
        elif action is NodeAction.DELETE:
            self.engine.delete_subtree(node_id)

    def _on_motion(self, controller, x, y):
        """Track the hovered node."""
        if self.engine.mode is not InteractionMode.IDLE:
            return
        _target, node_id = self.engine.hit_test(x, y)
        if node_id != self.hovered_id:
            self.hovered_id = node_id
            self.queue_draw()

    def _on_leave(self, controller):
        """Leaving the canvas ends any drag or pan."""
        self.hovered_id = None
        self.engine.pointer_leave()
        self.queue_draw()

    def _on_scroll(self, controller, dx, dy):
        """Ctrl + wheel zooms."""
        state = controller.get_current_event_state()
        modifier = bool(state & (Gdk.ModifierType.CONTROL_MASK | Gdk.ModifierType.META_MASK))
        if not self.engine.wheel(dy, modifier):
            return False
        self._notify_view_changed()
        self.queue_draw()
        return True

    # ==================== Commands ====================

    def zoom_in(self):
        """Increase zoom level."""
        self.engine.zoom_in()
        self._notify_view_changed()
        self.queue_draw()

    def zoom_out(self):
        """Decrease zoom level."""
        self.engine.zoom_out()
        self._notify_view_changed()
        self.queue_draw()

    def reset_map(self):
        """Reset to the seed map, centred in the widget."""
        self.hovered_id = None
        self.engine.reset(self._widget_center())

    def prompt_rename(self, node_id: str):
        """Ask for a new label in a dialog."""
        node = self.engine.tree.get(node_id)
        if node is None:
            return

        dialog = Adw.MessageDialog(
            transient_for=self.get_root(),
            heading="Rename Idea",
            body="Enter a new label:"
        )

        entry = Gtk.Entry()
        entry.set_text(node.label)
        entry.set_placeholder_text("Idea...")
        entry.set_margin_start(16)
        entry.set_margin_end(16)
        dialog.set_extra_child(entry)

        dialog.add_response("cancel", "Cancel")
        dialog.add_response("rename", "Rename")
        dialog.set_default_response("rename")
        dialog.connect("response", lambda d, r: self._confirm_rename(r, node_id, entry.get_text()))
        dialog.present()
        entry.grab_focus()

    def _confirm_rename(self, response: str, node_id: str, label: str):
        if response == "rename":
            self.engine.rename(node_id, label)

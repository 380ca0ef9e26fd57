"""Points, rectangles and node hit regions in canvas units."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mindcanvas.config import NodeSettings


@dataclass(frozen=True)
class Point:
    """A 2D point or vector."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> "Point":
        return Point(self.x * factor, self.y * factor)

    def __truediv__(self, factor: float) -> "Point":
        return Point(self.x / factor, self.y / factor)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


ORIGIN = Point(0.0, 0.0)


def polar(origin: Point, radius: float, angle: float) -> Point:
    """Project `radius` from `origin` along `angle` (radians, y down)."""
    return Point(origin.x + radius * math.cos(angle),
                 origin.y + radius * math.sin(angle))


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, p: Point) -> bool:
        return (self.x <= p.x <= self.x + self.width and
                self.y <= p.y <= self.y + self.height)


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float

    def contains(self, p: Point) -> bool:
        return (p - self.center).length() <= self.radius


class PointerTarget(Enum):
    """What a pointer-down landed on."""
    NODE_BODY = "node_body"
    NODE_TEXT = "node_text"
    ACTION_BUTTON = "action_button"
    BACKGROUND = "background"


class NodeAction(Enum):
    """Action buttons shown on a node."""
    ADD_CHILD = "add_child"
    DELETE = "delete"


@dataclass(frozen=True)
class NodeRegions:
    """The clickable parts of one node box."""
    box: Rect
    text: Rect
    add_button: Circle
    delete_button: Optional[Circle]

    def classify(self, p: Point) -> Optional[PointerTarget]:
        """Classify a canvas point, or None if it misses the node."""
        if self.action_at(p) is not None:
            return PointerTarget.ACTION_BUTTON
        if self.text.contains(p):
            return PointerTarget.NODE_TEXT
        if self.box.contains(p):
            return PointerTarget.NODE_BODY
        return None

    def action_at(self, p: Point) -> Optional[NodeAction]:
        if self.add_button.contains(p):
            return NodeAction.ADD_CHILD
        if self.delete_button is not None and self.delete_button.contains(p):
            return NodeAction.DELETE
        return None


def node_regions(center: Point, is_root: bool, node: NodeSettings) -> NodeRegions:
    """Compute the regions of a node box centred on `center`."""
    w, h = node.width, node.height
    left = center.x - w / 2
    top = center.y - h / 2
    r = node.button_radius
    padding = 12

    box = Rect(left, top, w, h)
    text = Rect(left + padding, center.y - node.text_height / 2,
                w - padding * 2, node.text_height)

    if is_root:
        # Root only gets an add button, hanging below the box
        add_button = Circle(Point(center.x, top + h), r)
        delete_button = None
    else:
        right = left + w
        delete_button = Circle(Point(right - r + 4, top - 4), r)
        add_button = Circle(Point(right - 3 * r, top - 4), r)

    return NodeRegions(box=box, text=text, add_button=add_button,
                       delete_button=delete_button)

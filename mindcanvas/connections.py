"""Parent to child connections and the segments drawn for them."""

from dataclasses import dataclass
from typing import Optional, List, Tuple

from mindcanvas.geometry import Point
from mindcanvas.tree import MindNode


@dataclass(frozen=True)
class Segment:
    """A drawable line between two node boundaries."""
    start: Point
    end: Point

    def length(self) -> float:
        return (self.end - self.start).length()


def derive_connections(root: MindNode) -> List[Tuple[str, str]]:
    """Every parent to child edge as an id pair, pre-order."""
    connections: List[Tuple[str, str]] = []

    def walk(node: MindNode):
        for child in node.children:
            connections.append((node.id, child.id))
            walk(child)

    walk(root)
    return connections


def trim_segment(start: Point, end: Point, gap: float) -> Optional[Segment]:
    """Shorten a centre-to-centre line by `gap` at both ends.

    Returns None when nothing is left to draw.
    """
    delta = end - start
    distance = delta.length()
    if distance - 2 * gap <= 0:
        return None
    direction = delta / distance
    return Segment(start + direction * gap, end - direction * gap)

"""Radial layout for the idea tree."""

import math
from typing import Optional, Dict, List

from mindcanvas.config import LayoutSettings
from mindcanvas.geometry import Point, ORIGIN, polar
from mindcanvas.tree import MindNode


def fan_angles(count: int, settings: LayoutSettings) -> List[float]:
    """Angles relative to the parent's outward direction for `count` children.

    A single child keeps the outward direction. Several children share
    `fan_spread`, but neighbours are never more than `max_fan_step` apart,
    and the fan is centred on the outward direction.
    """
    if count <= 0:
        return []
    if count == 1:
        return [0.0]
    step = min(settings.fan_spread / (count - 1), settings.max_fan_step)
    start = -((count - 1) * step) / 2
    return [start + index * step for index in range(count)]


def radial_layout(root: MindNode,
                  settings: Optional[LayoutSettings] = None) -> Dict[str, Point]:
    """Compute initial positions for every node of the tree.

    The root sits at the origin, its children on a circle starting north and
    going clockwise, and deeper children fan out along their parent's
    direction. Purely structural: the same tree always gives the same map.
    """
    settings = settings or LayoutSettings()
    positions: Dict[str, Point] = {root.id: ORIGIN}

    def place_branch(node: MindNode, pos: Point, angle: float):
        for child, relative in zip(node.children, fan_angles(len(node.children), settings)):
            absolute = angle + relative
            child_pos = polar(pos, settings.branch_radius, absolute)
            positions[child.id] = child_pos
            place_branch(child, child_pos, absolute)

    if root.children:
        step = 2 * math.pi / len(root.children)
        for index, child in enumerate(root.children):
            angle = index * step - math.pi / 2
            child_pos = polar(ORIGIN, settings.level_one_radius, angle)
            positions[child.id] = child_pos
            place_branch(child, child_pos, angle)

    return positions


def fanout_position(parent_pos: Point, child_index: int,
                    settings: Optional[LayoutSettings] = None) -> Point:
    """Seed position for a freshly appended child.

    Uses a fixed angular step per sibling index so repeated additions under
    one parent spread out instead of stacking. Existing nodes are not moved.
    """
    settings = settings or LayoutSettings()
    angle = child_index * settings.insert_fan_step
    return polar(parent_pos, settings.branch_radius, angle)

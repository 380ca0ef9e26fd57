"""Mindmap engine: tree, positions, view and interaction kept in step."""

import logging
from dataclasses import dataclass
from typing import Optional, List, Tuple, Callable

from mindcanvas.config import Settings
from mindcanvas.connections import Segment, derive_connections, trim_segment
from mindcanvas.geometry import (
    Point, ORIGIN, PointerTarget, NodeAction, NodeRegions, node_regions,
)
from mindcanvas.interaction import InteractionController, InteractionMode
from mindcanvas.layout import radial_layout, fanout_position
from mindcanvas.positions import PositionMap
from mindcanvas.tree import MindNode, TreeStore, seed_tree, flatten, generate_id
from mindcanvas.viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedNode:
    """A node as handed to the renderer."""
    id: str
    label: str
    level: int
    position: Point

    @property
    def is_root(self) -> bool:
        return self.level == 0


class MindMapEngine:
    """Owns every piece of editor state and the operations on it.

    Structural mutations update the tree and the position map in one call,
    so no observer ever sees one without the other.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 root: Optional[MindNode] = None):
        self.settings = settings or Settings()
        self.tree = TreeStore(root if root is not None else seed_tree())
        self.positions = PositionMap(radial_layout(self.tree.root, self.settings.layout))
        self.viewport = Viewport(self.settings.view)
        self.interaction = InteractionController(self.positions, self.viewport)

        # Callbacks
        self.on_changed: Optional[Callable[[], None]] = None

    # ==================== View state ====================

    @property
    def root(self) -> MindNode:
        return self.tree.root

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def offset(self) -> Point:
        return self.viewport.offset

    @property
    def mode(self) -> InteractionMode:
        return self.interaction.mode

    @property
    def dragged_id(self) -> Optional[str]:
        return self.interaction.dragged_id

    def position_of(self, node_id: str) -> Point:
        """Position used for drawing; unplaced nodes sit at the origin."""
        return self.positions.get(node_id) or ORIGIN

    # ==================== Tree mutations ====================

    def add_child(self, parent_id: str, label: Optional[str] = None) -> Optional[str]:
        """Append a child under `parent_id` and seed its position.

        Returns the new id, or None if the parent does not exist.
        """
        if parent_id not in self.tree:
            logger.debug("add_child ignored: no node %r", parent_id)
            return None

        if label is None:
            label = self.settings.node.default_label
        new_id = generate_id(lambda c: c in self.tree or c in self.positions)
        child = self.tree.add_child(parent_id, label, new_id=new_id)
        if child is None:
            return None

        parent_pos = self.positions.get(parent_id)
        if parent_pos is not None:
            index = len(self.tree.children_of(parent_id)) - 1
            self.positions.set(new_id, fanout_position(parent_pos, index, self.settings.layout))
        else:
            logger.debug("Parent %r has no position, %r left unplaced", parent_id, new_id)

        logger.debug("Added %r under %r", new_id, parent_id)
        self._notify_changed()
        return new_id

    def rename(self, node_id: str, label: str) -> bool:
        """Change a node's label; positions and children are untouched."""
        if not self.tree.rename(node_id, label):
            return False
        self._notify_changed()
        return True

    def delete_subtree(self, node_id: str) -> List[str]:
        """Remove a node, its descendants and all their positions.

        The root cannot be deleted. Returns the removed ids.
        """
        removed = self.tree.delete_subtree(node_id)
        if not removed:
            return []

        self.positions.remove_all(removed)
        if self.interaction.dragged_id in removed:
            self.interaction.pointer_up()

        logger.debug("Deleted %d node(s) starting at %r", len(removed), node_id)
        self._notify_changed()
        return removed

    def reset(self, center: Optional[Point] = None):
        """Back to the seed tree, a fresh layout and the initial view."""
        self.interaction.pointer_up()
        self.tree.replace_root(seed_tree())
        self.positions.replace_all(radial_layout(self.tree.root, self.settings.layout))
        self.viewport.reset(center)
        logger.info("Map reset to seed tree (%d nodes)", len(self.tree))
        self._notify_changed()

    # ==================== Pointer input ====================

    def pointer_down(self, target: PointerTarget, sx: float, sy: float,
                     node_id: Optional[str] = None) -> bool:
        return self.interaction.pointer_down(target, sx, sy, node_id)

    def pointer_move(self, sx: float, sy: float) -> bool:
        return self.interaction.pointer_move(sx, sy)

    def pointer_up(self) -> bool:
        return self.interaction.pointer_up()

    def pointer_leave(self) -> bool:
        return self.interaction.pointer_leave()

    def wheel(self, dy: float, modifier: bool) -> bool:
        return self.interaction.wheel(dy, modifier)

    def zoom_in(self) -> bool:
        return self.viewport.zoom_in()

    def zoom_out(self) -> bool:
        return self.viewport.zoom_out()

    # ==================== Hit testing ====================

    def regions_for(self, node: RenderedNode) -> NodeRegions:
        return node_regions(node.position, node.is_root, self.settings.node)

    def _topmost_first(self) -> List[RenderedNode]:
        nodes = list(reversed(self.nodes()))
        dragged = self.dragged_id
        if dragged is not None:
            nodes.sort(key=lambda n: n.id != dragged)
        return nodes

    def hit_test(self, sx: float, sy: float) -> Tuple[PointerTarget, Optional[str]]:
        """Classify a screen point as a node part or the background."""
        point = self.viewport.to_canvas(sx, sy)
        for node in self._topmost_first():
            target = self.regions_for(node).classify(point)
            if target is not None:
                return target, node.id
        return PointerTarget.BACKGROUND, None

    def action_at(self, sx: float, sy: float) -> Optional[Tuple[NodeAction, str]]:
        """The action button under a screen point, if any."""
        point = self.viewport.to_canvas(sx, sy)
        for node in self._topmost_first():
            regions = self.regions_for(node)
            action = regions.action_at(point)
            if action is not None:
                return action, node.id
            if regions.box.contains(point):
                return None
        return None

    # ==================== Render output ====================

    def nodes(self) -> List[RenderedNode]:
        """Every node pre-order with its depth and drawing position."""
        return [
            RenderedNode(node.id, node.label, level, self.position_of(node.id))
            for node, level in flatten(self.tree.root)
        ]

    def connections(self) -> List[Tuple[str, str]]:
        return derive_connections(self.tree.root)

    def segments(self) -> List[Segment]:
        """Connection lines trimmed to the node boundaries."""
        gap = self.settings.node.connection_trim
        result = []
        for parent_id, child_id in self.connections():
            start = self.positions.get(parent_id)
            end = self.positions.get(child_id)
            if start is None or end is None:
                continue
            segment = trim_segment(start, end, gap)
            if segment is not None:
                result.append(segment)
        return result

    def _notify_changed(self):
        if self.on_changed:
            self.on_changed()

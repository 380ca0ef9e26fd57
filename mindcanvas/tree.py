"""Immutable idea tree and its structural mutations."""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Optional, List, Tuple, Callable, Iterable, Set

from mindcanvas import ROOT_ID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MindNode:
    """A labelled idea and its ordered children."""
    id: str
    label: str = ""
    children: Tuple["MindNode", ...] = ()


def seed_tree() -> MindNode:
    """The fixed tree every map starts from."""
    def leaf(node_id: str, label: str) -> MindNode:
        return MindNode(node_id, label)

    return MindNode(ROOT_ID, "Central Idea", (
        MindNode("1", "Concept A", (
            leaf("1-1", "Detail A.1"),
            leaf("1-2", "Detail A.2"),
            leaf("1-3", "Detail A.3"),
        )),
        MindNode("2", "Concept B", (
            leaf("2-1", "Detail B.1"),
        )),
        leaf("3", "Concept C"),
        MindNode("4", "Concept D", (
            leaf("4-1", "Detail D.1"),
            leaf("4-2", "Detail D.2"),
        )),
        leaf("5", "Concept E"),
    ))


# ==================== Queries ====================

def find_node(root: MindNode, node_id: str) -> Optional[MindNode]:
    """Find a node by id, depth first."""
    if root.id == node_id:
        return root
    for child in root.children:
        found = find_node(child, node_id)
        if found is not None:
            return found
    return None


def collect_ids(node: MindNode) -> List[str]:
    """Pre-order ids of a node and all its descendants."""
    ids = [node.id]
    for child in node.children:
        ids.extend(collect_ids(child))
    return ids


def flatten(root: MindNode) -> List[Tuple[MindNode, int]]:
    """Pre-order list of (node, depth) pairs."""
    result: List[Tuple[MindNode, int]] = []

    def walk(node: MindNode, level: int):
        result.append((node, level))
        for child in node.children:
            walk(child, level + 1)

    walk(root, 0)
    return result


# ==================== Rebuilds ====================

def _rebuild(node: MindNode, target_id: str,
             update: Callable[[MindNode], MindNode]) -> MindNode:
    """Apply `update` to the target and rebuild only its ancestors.

    Subtrees off the root-to-target path are returned as the same objects.
    """
    if node.id == target_id:
        return update(node)

    changed = False
    children = []
    for child in node.children:
        new_child = _rebuild(child, target_id, update)
        changed = changed or new_child is not child
        children.append(new_child)

    if not changed:
        return node
    return replace(node, children=tuple(children))


def with_child(root: MindNode, parent_id: str, child: MindNode) -> MindNode:
    """Append `child` as the last child of `parent_id`."""
    return _rebuild(root, parent_id,
                    lambda parent: replace(parent, children=parent.children + (child,)))


def with_label(root: MindNode, node_id: str, label: str) -> MindNode:
    return _rebuild(root, node_id, lambda node: replace(node, label=label))


def _parent_of(root: MindNode, node_id: str) -> Optional[MindNode]:
    for child in root.children:
        if child.id == node_id:
            return root
        found = _parent_of(child, node_id)
        if found is not None:
            return found
    return None


def without_subtree(root: MindNode, node_id: str) -> MindNode:
    """Detach `node_id` from its parent's children."""
    parent = _parent_of(root, node_id)
    if parent is None:
        return root
    return _rebuild(root, parent.id, lambda p: replace(
        p, children=tuple(c for c in p.children if c.id != node_id)))


# ==================== Store ====================

def generate_id(taken: Callable[[str], bool]) -> str:
    """Generate a short random id for which `taken` is false."""
    while True:
        candidate = uuid.uuid4().hex[:9]
        if not taken(candidate):
            return candidate


class TreeStore:
    """Owns the canonical tree and applies mutations to it."""

    def __init__(self, root: Optional[MindNode] = None):
        self._root = root if root is not None else seed_tree()
        self._ids: Set[str] = set(collect_ids(self._root))

    @property
    def root(self) -> MindNode:
        return self._root

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def ids(self) -> Set[str]:
        return set(self._ids)

    def get(self, node_id: str) -> Optional[MindNode]:
        if node_id not in self._ids:
            return None
        return find_node(self._root, node_id)

    def add_child(self, parent_id: str, label: str,
                  new_id: Optional[str] = None) -> Optional[MindNode]:
        """Append a new leaf under `parent_id`; None if the parent is unknown."""
        if parent_id not in self._ids:
            logger.debug("add_child: unknown parent %r", parent_id)
            return None

        if new_id is None:
            new_id = generate_id(lambda c: c in self._ids)
        elif new_id in self._ids:
            logger.debug("add_child: id %r already in tree", new_id)
            return None

        child = MindNode(new_id, label)
        self._root = with_child(self._root, parent_id, child)
        self._ids.add(new_id)
        return child

    def rename(self, node_id: str, label: str) -> bool:
        """Replace a node's label."""
        if node_id not in self._ids:
            logger.debug("rename: unknown node %r", node_id)
            return False
        self._root = with_label(self._root, node_id, label)
        return True

    def delete_subtree(self, node_id: str) -> List[str]:
        """Remove a node and its descendants, returning their ids pre-order."""
        if node_id == self._root.id:
            logger.debug("delete_subtree: refusing to delete the root")
            return []
        node = self.get(node_id)
        if node is None:
            logger.debug("delete_subtree: unknown node %r", node_id)
            return []

        removed = collect_ids(node)
        self._root = without_subtree(self._root, node_id)
        self._ids.difference_update(removed)
        return removed

    def replace_root(self, root: MindNode):
        """Swap in a whole new tree."""
        self._root = root
        self._ids = set(collect_ids(root))

    def children_of(self, node_id: str) -> Iterable[MindNode]:
        node = self.get(node_id)
        return node.children if node is not None else ()

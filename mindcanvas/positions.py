"""Node id to canvas position side table."""

from typing import Optional, Dict, Iterable, Iterator, Mapping

from mindcanvas.geometry import Point


class PositionMap:
    """Positions keyed by node id, kept apart from the tree shape."""

    def __init__(self, positions: Optional[Mapping[str, Point]] = None):
        self._positions: Dict[str, Point] = dict(positions or {})

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def get(self, node_id: str) -> Optional[Point]:
        return self._positions.get(node_id)

    def set(self, node_id: str, position: Point):
        self._positions[node_id] = position

    def remove_all(self, node_ids: Iterable[str]) -> int:
        """Drop every listed id; return how many entries went away."""
        removed = 0
        for node_id in node_ids:
            if self._positions.pop(node_id, None) is not None:
                removed += 1
        return removed

    def replace_all(self, positions: Mapping[str, Point]):
        """Swap the whole table in place, keeping this object's identity."""
        self._positions = dict(positions)

    def as_dict(self) -> Dict[str, Point]:
        return dict(self._positions)

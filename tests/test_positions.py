"""Tests for the position side table."""

from mindcanvas.geometry import Point
from mindcanvas.positions import PositionMap


def test_set_and_get():
    positions = PositionMap()
    positions.set("a", Point(1, 2))
    assert positions.get("a") == Point(1, 2)
    assert positions.get("b") is None
    assert "a" in positions
    assert len(positions) == 1


def test_remove_all_counts_present_only():
    positions = PositionMap({"a": Point(), "b": Point()})
    assert positions.remove_all(["a", "zzz"]) == 1
    assert list(positions) == ["b"]


def test_replace_all_keeps_identity():
    positions = PositionMap({"a": Point()})
    same = positions
    positions.replace_all({"c": Point(3, 3)})
    assert same is positions
    assert positions.as_dict() == {"c": Point(3, 3)}


def test_as_dict_is_a_copy():
    positions = PositionMap({"a": Point()})
    positions.as_dict()["b"] = Point()
    assert "b" not in positions

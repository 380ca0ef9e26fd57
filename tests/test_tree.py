"""Tests for the immutable idea tree."""

import uuid

import pytest

from mindcanvas import ROOT_ID
from mindcanvas.tree import (
    MindNode, TreeStore, seed_tree, find_node, collect_ids, flatten,
    with_child, with_label, without_subtree, generate_id,
)


SEED_IDS = ["root", "1", "1-1", "1-2", "1-3", "2", "2-1", "3", "4", "4-1", "4-2", "5"]


class TestSeedTree:
    """Test the fixed starting tree."""

    def test_root_id(self):
        """Test the root uses the fixed id."""
        assert seed_tree().id == ROOT_ID

    def test_ids_preorder(self):
        """Test every seed id in pre-order."""
        assert collect_ids(seed_tree()) == SEED_IDS

    def test_fresh_but_equal(self):
        """Test two seed trees compare equal."""
        assert seed_tree() == seed_tree()


class TestQueries:
    """Test lookups and flattening."""

    def test_find_node(self):
        """Test finding a nested node."""
        node = find_node(seed_tree(), "4-2")
        assert node is not None
        assert node.label == "Detail D.2"

    def test_find_missing(self):
        """Test a missing id gives None."""
        assert find_node(seed_tree(), "nope") is None

    def test_flatten_levels(self):
        """Test flatten reports depth from the root."""
        levels = {node.id: level for node, level in flatten(seed_tree())}
        assert levels["root"] == 0
        assert levels["3"] == 1
        assert levels["1-3"] == 2

    def test_flatten_order(self):
        """Test flatten walks pre-order."""
        assert [node.id for node, _ in flatten(seed_tree())] == SEED_IDS


class TestRebuilds:
    """Test copy-on-write rebuilds."""

    def test_with_child_appends_last(self):
        """Test a new child goes after existing siblings."""
        root = with_child(seed_tree(), "1", MindNode("x", "X"))
        assert [c.id for c in find_node(root, "1").children] == ["1-1", "1-2", "1-3", "x"]

    def test_with_child_shares_untouched_subtrees(self):
        """Test siblings off the path keep their identity."""
        before = seed_tree()
        after = with_child(before, "1", MindNode("x", "X"))
        assert after is not before
        for old, new in zip(before.children[1:], after.children[1:]):
            assert old is new

    def test_with_label_rebuilds_path_only(self):
        """Test renaming rebuilds just the ancestors."""
        before = seed_tree()
        after = with_label(before, "4-1", "Renamed")
        assert find_node(after, "4-1").label == "Renamed"
        assert after.children[3] is not before.children[3]
        assert after.children[3].children[1] is before.children[3].children[1]
        assert after.children[0] is before.children[0]

    def test_with_label_missing_is_identity(self):
        """Test a missing target returns the same tree."""
        root = seed_tree()
        assert with_label(root, "nope", "x") is root

    def test_without_subtree_keeps_sibling_order(self):
        """Test removal keeps the order of the remaining children."""
        root = without_subtree(seed_tree(), "3")
        assert [c.id for c in root.children] == ["1", "2", "4", "5"]

    def test_without_root_is_identity(self):
        """Test the root has no parent to detach from."""
        root = seed_tree()
        assert without_subtree(root, ROOT_ID) is root


class TestTreeStore:
    """Test the mutable store wrapper."""

    def test_add_child(self):
        """Test adding under an existing parent."""
        store = TreeStore()
        child = store.add_child("2", "Fresh", new_id="abc")
        assert child == MindNode("abc", "Fresh")
        assert "abc" in store
        assert [c.id for c in store.children_of("2")] == ["2-1", "abc"]

    def test_add_child_generates_id(self):
        """Test a generated id is new to the tree."""
        store = TreeStore()
        child = store.add_child(ROOT_ID, "Fresh")
        assert child.id not in SEED_IDS
        assert len(child.id) == 9

    def test_add_child_unknown_parent(self):
        """Test an unknown parent is a no-op."""
        store = TreeStore()
        root = store.root
        assert store.add_child("ghost", "x") is None
        assert store.root is root

    def test_add_child_duplicate_id(self):
        """Test an id already in the tree is refused."""
        store = TreeStore()
        assert store.add_child(ROOT_ID, "x", new_id="1-1") is None
        assert len(store) == len(SEED_IDS)

    def test_rename(self):
        """Test renaming changes only the label."""
        store = TreeStore()
        assert store.rename("1", "Renamed")
        node = store.get("1")
        assert node.label == "Renamed"
        assert [c.id for c in node.children] == ["1-1", "1-2", "1-3"]

    def test_rename_empty_label(self):
        """Test empty labels are allowed."""
        store = TreeStore()
        assert store.rename("5", "")
        assert store.get("5").label == ""

    def test_rename_unknown(self):
        """Test renaming a missing node is a no-op."""
        store = TreeStore()
        root = store.root
        assert not store.rename("ghost", "x")
        assert store.root is root

    def test_delete_subtree(self):
        """Test deleting returns the subtree ids pre-order."""
        store = TreeStore()
        removed = store.delete_subtree("1")
        assert removed == ["1", "1-1", "1-2", "1-3"]
        for node_id in removed:
            assert node_id not in store
            assert find_node(store.root, node_id) is None

    def test_delete_root_refused(self):
        """Test the root can never be deleted."""
        store = TreeStore()
        root = store.root
        assert store.delete_subtree(ROOT_ID) == []
        assert store.root is root
        assert len(store) == len(SEED_IDS)

    def test_delete_unknown(self):
        """Test deleting a missing id is a no-op."""
        store = TreeStore()
        assert store.delete_subtree("ghost") == []

    def test_replace_root(self):
        """Test swapping the whole tree refreshes the id index."""
        store = TreeStore()
        store.replace_root(MindNode(ROOT_ID, "Only"))
        assert store.ids() == {ROOT_ID}
        assert "1" not in store


class TestGenerateId:
    """Test id generation."""

    def test_skips_taken(self, monkeypatch):
        """Test a taken candidate is retried."""
        candidates = iter([
            uuid.UUID("11111111-1111-1111-1111-111111111111"),
            uuid.UUID("22222222-2222-2222-2222-222222222222"),
        ])
        monkeypatch.setattr("mindcanvas.tree.uuid.uuid4", lambda: next(candidates))
        assert generate_id(lambda c: c == "111111111") == "222222222"

    @pytest.mark.parametrize("n", [1, 50])
    def test_unique_over_many(self, n):
        """Test repeated generation avoids everything already taken."""
        taken = set()
        for _ in range(n):
            taken.add(generate_id(lambda c: c in taken))
        assert len(taken) == n

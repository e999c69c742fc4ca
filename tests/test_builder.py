"""Tests for tree construction.

Covers depth limiting, leaf exclusion, the level/leaf invariants, the
last-pushed-first expansion order and failure propagation.
"""

import pytest
from unittest.mock import Mock

from communitytree import RetrievalFailure, TreeBuilder, build_tree
from communitytree.adapters import InMemoryUnitStore, group, leaf
from communitytree.core.node import UnitType
from communitytree.testing import build_store, levels_by_handle, tree_shape


def test_full_depth_scenario(store):
    """A at level 1, a1 and B at level 2, b1 at level 3."""
    root = build_tree(store, max_depth=999)

    assert root.unit is None
    assert root.level == 0
    assert levels_by_handle(root) == {"a": 1, "a1": 2, "b": 2, "b1": 3}


def test_children_keep_discovery_order(store):
    """Sub-groups are attached before leaves of the same group."""
    root = build_tree(store)

    assert tree_shape(root) == [
        ("a", 1, [
            ("b", 2, [("b1", 3, [])]),
            ("a1", 2, []),
        ]),
    ]


def test_depth_one_keeps_roots_unexpanded(store):
    root = build_tree(store, max_depth=1)

    assert tree_shape(root) == [("a", 1, [])]


def test_depth_two_shows_subgroup_unexpanded(store):
    root = build_tree(store, max_depth=2)

    levels = levels_by_handle(root)
    assert levels == {"a": 1, "b": 2, "a1": 2}
    assert "b1" not in levels


@pytest.mark.parametrize("depth", [0, -1])
def test_non_positive_depth_returns_roots_only(store, depth):
    root = build_tree(store, max_depth=depth)

    assert tree_shape(root) == [("a", 1, [])]
    assert store.calls == []


def test_exclude_leaves(store):
    root = build_tree(store, exclude_leaves=True)

    units = [n.unit for n in root.walk() if n.unit is not None]
    assert [u.handle for u in units] == ["a", "b"]
    assert all(u.unit_type is UnitType.GROUP for u in units)


def test_empty_roots_give_bare_root():
    root = TreeBuilder(InMemoryUnitStore()).build([], 999)

    assert root.children == []
    assert root.count() == 1


@pytest.mark.parametrize("depth", [0, 1, 2, 3, 5, 999])
def test_invariants_hold_for_every_depth(depth):
    store = build_store({
        "x": ["x1", "x2", {"y": ["y1", {"z": ["z1"]}]}, {"w": []}],
        "v": [{"u": [{"t": ["t1"]}]}],
    })
    root = build_tree(store, max_depth=depth)

    for node in root.walk():
        for child in node.children:
            assert child.level == node.level + 1
        if node.unit is not None and node.unit.is_leaf():
            assert node.children == []
        # Roots sit at level 1, so a depth of 0 still shows them
        assert node.level <= max(depth, 1)


def test_expansion_is_last_pushed_first():
    store = build_store({"a": [{"b": [{"d": []}]}, {"c": []}]})

    build_tree(store)

    assert store.calls == [
        "sub_groups:a", "leaves:a",
        "sub_groups:c", "leaves:c",
        "sub_groups:b", "leaves:b",
        "sub_groups:d", "leaves:d",
    ]


def test_leaves_are_never_expanded(store):
    build_tree(store)

    assert not any(call.endswith(":a1") or call.endswith(":b1") for call in store.calls)


def test_build_is_deterministic(store):
    first = build_tree(store)
    second = build_tree(store)

    assert first is not second
    assert tree_shape(first) == tree_shape(second)


def test_non_group_root_rejected():
    with pytest.raises(ValueError):
        TreeBuilder(InMemoryUnitStore()).build([leaf("l1")], 999)


def test_store_retrieval_failure_propagates(store):
    store.available = False

    with pytest.raises(RetrievalFailure) as exc_info:
        build_tree(store)

    assert exc_info.value.operation == "list_top_level_groups"


def test_unexpected_store_error_is_wrapped():
    root_group = group("a")
    failing = Mock()
    failing.get_sub_groups.side_effect = ConnectionError("db down")

    with pytest.raises(RetrievalFailure) as exc_info:
        TreeBuilder(failing).build([root_group], 999)

    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert exc_info.value.unit is root_group


def test_failure_mid_build_returns_nothing():
    store = build_store({"a": [{"b": ["b1"]}]})
    real_get_leaves = store.get_leaves

    def flaky_leaves(unit):
        if unit.handle == "b":
            raise RetrievalFailure("lost connection", unit=unit)
        return real_get_leaves(unit)

    store.get_leaves = flaky_leaves

    with pytest.raises(RetrievalFailure):
        build_tree(store)


def test_has_children_error_is_wrapped():
    failing = Mock()
    failing.has_children.side_effect = ConnectionError("db down")

    with pytest.raises(RetrievalFailure) as exc_info:
        TreeBuilder(failing).has_children(group("a"))

    assert exc_info.value.operation == "has_children"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_has_children_reports_groups_and_leaves():
    store = build_store({"a": ["a1"], "b": [{"c": []}], "d": []})
    builder = TreeBuilder(store)

    assert builder.has_children(store.find("a"))
    assert builder.has_children(store.find("b"))
    assert not builder.has_children(store.find("d"))

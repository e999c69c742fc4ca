"""Tests for the reference and list projections."""

from communitytree import (
    ListProjection,
    NestedList,
    ReferenceGroup,
    ReferenceProjection,
    build_tree,
    nested_list,
    reference_groups,
)
from communitytree.core.projection import LinkItem
from communitytree.testing import build_store


def _top(root):
    return root.children[0]


class TestReferenceProjection:
    """Leaf and sub-group groupings stay separate siblings."""

    def test_two_leaves_one_group(self):
        store = build_store({"a": ["a1", "a2", {"b": ["b1"]}]})
        root = build_tree(store)

        reference = ReferenceProjection().to_reference_groups(_top(root))

        assert reference.unit.handle == "a"
        assert [g.kind for g in reference.groupings] == ["leaves", "groups"]

        leaf_set, group_set = reference.groupings
        assert [r.unit.handle for r in leaf_set.references] == ["a1", "a2"]
        assert [r.unit.handle for r in group_set.references] == ["b"]

        nested = group_set.references[0]
        assert len(nested.groupings) == 1
        assert nested.groupings[0].kind == "leaves"
        assert [r.unit.handle for r in nested.groupings[0].references] == ["b1"]

    def test_leaf_references_are_terminal(self, store):
        reference = ReferenceProjection().to_reference_groups(_top(build_tree(store)))

        leaf_set = reference.groupings[0]
        assert all(r.groupings == [] for r in leaf_set.references)

    def test_empty_groupings_are_omitted(self):
        store = build_store({"a": [{"b": []}]})
        reference = ReferenceProjection().to_reference_groups(_top(build_tree(store)))

        assert [g.kind for g in reference.groupings] == ["groups"]
        assert reference.groupings[0].references[0].groupings == []

    def test_appends_into_existing_grouping(self, store):
        into = ReferenceGroup(kind="hierarchy")
        ReferenceProjection().to_reference_groups(_top(build_tree(store)), into)

        assert [r.unit.handle for r in into.references] == ["a"]

    def test_reference_groups_covers_every_top_level_group(self):
        store = build_store({"a": ["a1"], "c": []})

        result = reference_groups(build_tree(store))

        assert [r.unit.handle for r in result.references] == ["a", "c"]
        assert result.to_dict()["references"][1] == {"type": "group", "handle": "c", "name": "C"}


class TestListProjection:
    """One emphasized link per group and at most one sub-list."""

    def test_scenario_links(self, store):
        listing = nested_list("/repo", build_tree(store))

        first, sub_list = listing.items
        assert first == LinkItem("A", "/repo/handle/a", emphasized=True)
        assert isinstance(sub_list, NestedList)
        assert sub_list.name == "sub-list-a"

        a1, b, b_list = sub_list.items
        assert a1 == LinkItem("A1", "/repo/handle/a1")
        assert b == LinkItem("B", "/repo/handle/b", emphasized=True)
        assert b_list.items == [LinkItem("B1", "/repo/handle/b1")]

    def test_single_sub_list_with_leaves_first(self):
        store = build_store({"a": [{"b": []}, "a1", "a2"]})
        listing = nested_list("/repo", build_tree(store))

        assert len(listing.sub_lists) == 1
        sub_list = listing.sub_lists[0]
        assert [item.target for item in sub_list.links] == [
            "/repo/handle/a1", "/repo/handle/a2", "/repo/handle/b",
        ]
        # b has no children, so no sub-list of its own
        assert sub_list.sub_lists == []

    def test_childless_group_has_no_sub_list(self):
        store = build_store({"a": []})
        listing = nested_list("/repo", build_tree(store))

        assert listing.items == [LinkItem("A", "/repo/handle/a", emphasized=True)]

    def test_link_prefix(self, store):
        root = build_tree(store)

        bare = NestedList("bare")
        ListProjection(link_prefix="").to_nested_list("/repo/", _top(root), bare)
        assert bare.items[0].target == "/repo/a"

        custom = nested_list("", root, link_prefix="items")
        assert custom.items[0].target == "/items/a"

    def test_to_dict_round_shape(self, store):
        data = nested_list("/repo", build_tree(store)).to_dict()

        assert data["name"] == "hierarchy-browser"
        assert data["items"][0] == {"label": "A", "target": "/repo/handle/a", "emphasized": True}
        assert data["items"][1]["name"] == "sub-list-a"

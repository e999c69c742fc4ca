"""Test fixtures for communitytree consumers.

These helpers build in-memory hierarchies from nested literals and reduce
built trees to plain shapes, so tests can assert on structure without
walking TreeNode objects by hand.
"""

from typing import Any, List, Mapping, Sequence, Tuple, Union

from ..adapters.memory import InMemoryUnitStore, MemoryUnit, group, leaf
from ..core.node import TreeNode

# A group literal is {"handle": [children...]}; a leaf literal is a string.
ForestSpec = Sequence[Union[str, Mapping[str, Any]]]


def _build_group(handle: str, children: ForestSpec) -> MemoryUnit:
    unit = group(handle, name=handle.upper())
    for child in children:
        if isinstance(child, str):
            unit.add_leaf(leaf(child, name=child.upper()))
        else:
            for sub_handle, sub_children in child.items():
                unit.add_group(_build_group(sub_handle, sub_children))
    return unit


def build_store(forest: Mapping[str, ForestSpec]) -> InMemoryUnitStore:
    """Build a store from ``{"group": ["leaf", {"subgroup": [...]}]}``.

    Names are the upper-cased handles. Within a group, children keep the
    order given, but sub-groups and leaves are stored separately, so the
    store always returns sub-groups first.

    Example:
        store = build_store({"a": ["a1", {"b": ["b1"]}]})
    """
    store = InMemoryUnitStore()
    for handle, children in forest.items():
        store.add_top_level(_build_group(handle, children))
    return store


def tree_shape(node: TreeNode) -> List[Tuple[str, int, list]]:
    """Reduce the children of ``node`` to ``[(handle, level, [...]), ...]``."""
    return [
        (child.unit.handle, child.level, tree_shape(child))
        for child in node.children
    ]


def levels_by_handle(node: TreeNode) -> dict:
    """Map every unit handle in the subtree to its level."""
    return {n.unit.handle: n.level for n in node.walk() if n.unit is not None}

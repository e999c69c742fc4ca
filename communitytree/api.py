"""High-level API for communitytree.

This module provides simple, functional interfaces for the common cases:
build a tree, project it, compute its cache descriptor. These functions
wrap the object-oriented API; a view that needs the tree more than once per
request should hold a CommunityTreeHelper instead.
"""

from typing import Iterable, Optional

from .config import DEFAULT_DEPTH, HierarchyConfig
from .core.adapter import ItemCounter, UnitStore
from .core.builder import TreeBuilder, list_top_level_groups
from .core.node import TreeNode, Unit
from .core.projection import (
    ListProjection,
    NestedList,
    ReferenceGroup,
    ReferenceProjection,
)
from .core.validity import CacheDescriptor, ValidityAccumulator, fingerprint
from .error_policies import ErrorPolicy


def build_tree(
    store: UnitStore,
    roots: Optional[Iterable[Unit]] = None,
    max_depth: int = DEFAULT_DEPTH,
    exclude_leaves: bool = False,
) -> TreeNode:
    """Build a tree from ``roots``, or from every top-level group.

    Example:
        >>> store = InMemoryUnitStore([group("a")])
        >>> root = build_tree(store, max_depth=2)
        >>> [child.unit.handle for child in root.children]
        ['a']
    """
    if roots is None:
        roots = list_top_level_groups(store)
    return TreeBuilder(store).build(roots, max_depth, exclude_leaves)


def reference_groups(tree: TreeNode, kind: str = "hierarchy") -> ReferenceGroup:
    """Project every top-level group of ``tree`` onto reference groupings."""
    projection = ReferenceProjection()
    into = ReferenceGroup(kind=kind)
    groups, _ = tree.partition_children()
    for node in groups:
        projection.to_reference_groups(node, into)
    return into


def nested_list(
    base_path: str,
    tree: TreeNode,
    name: str = "hierarchy-browser",
    link_prefix: str = "handle",
) -> NestedList:
    """Project every top-level group of ``tree`` onto nested link lists.

    Example:
        >>> listing = nested_list("/repo", root)
        >>> listing.items[0].target
        '/repo/handle/a'
    """
    projection = ListProjection(link_prefix)
    into = NestedList(name)
    groups, _ = tree.partition_children()
    for node in groups:
        projection.to_nested_list(base_path, node, into)
    return into


def compute_validity(
    tree: TreeNode,
    config: Optional[HierarchyConfig] = None,
    item_counter: Optional[ItemCounter] = None,
    metric_policy: Optional[ErrorPolicy] = None,
) -> CacheDescriptor:
    """Compute the cache descriptor of an already built tree."""
    return ValidityAccumulator(config, metric_policy).accumulate(tree, item_counter)


def cache_key(max_depth: int, exclude_leaves: bool, render_full: bool = True) -> str:
    """Fingerprint of a hierarchy browser's parameters."""
    return fingerprint(max_depth, exclude_leaves, render_full)

"""Community tree helper for communitytree.

CommunityTreeHelper bundles what a hierarchy view needs: one cached tree,
both projections over it, and the validity walk. A helper is built with a
fixed depth and leaf policy and belongs to one logical request; ``reset()``
ends that request's use of the cached tree.
"""

import logging
import threading
from typing import Optional, Tuple

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
from .core.validity import CacheDescriptor, ValidityAccumulator, ValidityOutcome
from .error_policies import ErrorPolicy
from .errors import ConcurrentUseError, RetrievalFailure

logger = logging.getLogger(__name__)


class TreeCache:
    """Holds at most one built tree for its owner.

    The cache key is simply "has the tree been built yet". The parent,
    depth and leaf policy of the first successful build win until
    ``reset()``; the owner keeps them fixed for its lifetime.
    """

    def __init__(self, builder: TreeBuilder):
        self.builder = builder
        self._root: Optional[TreeNode] = None
        self._owner: Optional[int] = None
        self._owner_lock = threading.Lock()
        self.builds = 0

    @property
    def is_built(self) -> bool:
        return self._root is not None

    def get_or_build(self,
                     parent: Optional[Unit],
                     depth: int,
                     exclude_leaves: bool) -> TreeNode:
        """Return the cached tree, building it on first access.

        Args:
            parent: Group whose sub-groups are the roots, or None for all
                top-level groups
            depth: Maximum expansion depth
            exclude_leaves: Leave leaves out of the tree

        Raises:
            RetrievalFailure: If the store fails; nothing is cached
            ConcurrentUseError: If called from a second thread before reset
        """
        self._claim()

        if self._root is None:
            if parent is not None:
                roots = self.builder.sub_groups_of(parent)
            else:
                roots = list_top_level_groups(self.builder.store)
            self._root = self.builder.build(roots, depth, exclude_leaves)
            self.builds += 1
        else:
            logger.debug("Reusing cached tree")

        return self._root

    def reset(self) -> None:
        """Drop the cached tree; the next access rebuilds it."""
        self._root = None
        with self._owner_lock:
            self._owner = None

    def _claim(self) -> None:
        current = threading.get_ident()
        with self._owner_lock:
            if self._owner is None:
                self._owner = current
                return
            owner = self._owner
        if owner != current:
            raise ConcurrentUseError(
                "Tree helper shared across threads; use one helper per request"
            )


class CommunityTreeHelper:
    """Builds, caches, projects and validates one group hierarchy."""

    def __init__(self,
                 store: UnitStore,
                 depth: int = DEFAULT_DEPTH,
                 exclude_leaves: bool = False,
                 config: Optional[HierarchyConfig] = None,
                 item_counter: Optional[ItemCounter] = None,
                 metric_policy: Optional[ErrorPolicy] = None):
        """Initialize helper.

        Args:
            store: UnitStore supplying the hierarchy
            depth: Maximum expansion depth for the helper's lifetime
            exclude_leaves: Leave leaves out of the tree
            config: Options for validity and list links
            item_counter: Optional source of item counts
            metric_policy: Handles item counter failures
        """
        self.store = store
        self.depth = depth
        self.exclude_leaves = exclude_leaves
        self.config = config or HierarchyConfig()
        self.item_counter = item_counter

        self.cache = TreeCache(TreeBuilder(store))
        self.accumulator = ValidityAccumulator(self.config, metric_policy)
        self.reference_projection = ReferenceProjection()
        self.list_projection = ListProjection(self.config.link_prefix)

        self._descriptor: Optional[CacheDescriptor] = None
        self._descriptor_tree: Optional[TreeNode] = None

    def get_root(self, parent: Optional[Unit] = None) -> TreeNode:
        """Return the (possibly cached) tree for ``parent``."""
        return self.cache.get_or_build(parent, self.depth, self.exclude_leaves)

    def make_reference_set(self, into: ReferenceGroup, parent: Optional[Unit] = None) -> ReferenceGroup:
        """Add one reference per top-level group of the tree to ``into``."""
        root = self.get_root(parent)
        groups, _ = root.partition_children()
        for node in groups:
            self.reference_projection.to_reference_groups(node, into)
        return into

    def make_list(self, base_path: str, into: NestedList, parent: Optional[Unit] = None) -> NestedList:
        """Add the nested links of every top-level group of the tree to ``into``."""
        root = self.get_root(parent)
        groups, _ = root.partition_children()
        for node in groups:
            self.list_projection.to_nested_list(base_path, node, into)
        return into

    def add_to_validity(self,
                        parent: Optional[Unit] = None,
                        extra_tokens: Tuple[str, ...] = ()) -> CacheDescriptor:
        """Compute the cache descriptor of the tree.

        The descriptor is computed once per built tree instance.

        Raises:
            RetrievalFailure: If the tree cannot be built
        """
        root = self.get_root(parent)
        if self._descriptor is None or self._descriptor_tree is not root:
            self._descriptor = self.accumulator.accumulate(root, self.item_counter, extra_tokens)
            self._descriptor_tree = root
        return self._descriptor

    def validity(self,
                 parent: Optional[Unit] = None,
                 extra_tokens: Tuple[str, ...] = ()) -> ValidityOutcome:
        """Like ``add_to_validity`` but reports retrieval failures as uncacheable."""
        try:
            return ValidityOutcome.ok(self.add_to_validity(parent, extra_tokens))
        except RetrievalFailure as e:
            logger.warning("Hierarchy validity unavailable, treating as uncacheable: %s", e)
            return ValidityOutcome.uncacheable(e)

    def reset(self) -> None:
        """Clear the cached tree and its descriptor."""
        self.cache.reset()
        self._descriptor = None
        self._descriptor_tree = None

"""Cacheable hierarchy components for communitytree.

A component follows a request lifecycle: ``setup()`` fixes its parameters,
``get_key()`` and ``get_validity()`` let a consuming cache decide whether a
stored rendering can be reused, ``render()`` produces a projection, and
``recycle()`` ends the request and drops every per-request cache.

Two components are provided:

- HierarchyBrowser: the whole hierarchy from the top-level groups down,
  rendered as reference groupings or as nested link lists.
- GroupChildrenView: the sub-groups and leaves below one group.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

from .config import DEFAULT_DEPTH, HierarchyConfig
from .core.adapter import ItemCounter, UnitStore
from .core.node import Unit
from .core.projection import NestedList, ReferenceGroup
from .core.validity import CacheDescriptor, ValidityOutcome, fingerprint
from .error_policies import ErrorPolicy
from .errors import RetrievalFailure
from .helper import CommunityTreeHelper

logger = logging.getLogger(__name__)

Rendering = Union[ReferenceGroup, NestedList]


class CacheableComponent(ABC):
    """Base class for components whose output can be cached.

    Subclasses create ``self.helper`` in ``setup()``.
    """

    def __init__(self,
                 store: UnitStore,
                 config: Optional[HierarchyConfig] = None,
                 item_counter: Optional[ItemCounter] = None,
                 metric_policy: Optional[ErrorPolicy] = None):
        self.store = store
        self.config = config or HierarchyConfig()
        self.item_counter = item_counter
        self.metric_policy = metric_policy
        self.helper: Optional[CommunityTreeHelper] = None
        self._validity: Optional[ValidityOutcome] = None

    @abstractmethod
    def get_key(self) -> str:
        """Return a key unique within this component's output space."""
        pass

    @abstractmethod
    def compute_validity(self) -> ValidityOutcome:
        """Compute a fresh validity outcome for the current request."""
        pass

    @abstractmethod
    def render(self, base_path: str = "") -> Optional[Rendering]:
        """Produce this component's projection, or None if there is nothing to show."""
        pass

    def validity(self) -> ValidityOutcome:
        """Return the validity outcome, computed once per request."""
        self._require_setup()
        if self._validity is None:
            self._validity = self.compute_validity()
        return self._validity

    def get_validity(self) -> Optional[CacheDescriptor]:
        """Return the cache descriptor, or None when the output is uncacheable."""
        return self.validity().descriptor

    def recycle(self) -> None:
        """End the current request: drop the cached tree and validity."""
        if self.helper is not None:
            self.helper.reset()
        self._validity = None

    def _new_helper(self, depth: int, exclude_leaves: bool) -> CommunityTreeHelper:
        return CommunityTreeHelper(
            self.store,
            depth=depth,
            exclude_leaves=exclude_leaves,
            config=self.config,
            item_counter=self.item_counter,
            metric_policy=self.metric_policy,
        )

    def _require_setup(self) -> None:
        if self.helper is None:
            raise RuntimeError(f"{self.__class__.__name__} used before setup()")


class HierarchyBrowser(CacheableComponent):
    """Displays every top-level group and its descendants.

    May be limited to a depth and may exclude leaves from the tree.
    """

    def setup(self, depth: int = DEFAULT_DEPTH, exclude_leaves: bool = False) -> 'HierarchyBrowser':
        self.depth = depth
        self.exclude_leaves = exclude_leaves
        self.helper = self._new_helper(depth, exclude_leaves)
        self._validity = None
        return self

    def get_key(self) -> str:
        self._require_setup()
        return fingerprint(self.depth, self.exclude_leaves, self.config.render_full)

    def compute_validity(self) -> ValidityOutcome:
        outcome = self.helper.validity()
        logger.info(
            "view_hierarchy: depth=%d exclude_leaves=%s cacheable=%s",
            self.depth, self.exclude_leaves, outcome.cacheable,
        )
        return outcome

    def render(self, base_path: str = "") -> Rendering:
        """Render reference groupings, or nested links when ``render_full`` is off.

        Raises:
            RetrievalFailure: If the hierarchy cannot be built
        """
        self._require_setup()
        if self.config.render_full:
            return self.helper.make_reference_set(ReferenceGroup(kind="hierarchy"))
        return self.helper.make_list(base_path, NestedList("hierarchy-browser"))


class GroupChildrenView(CacheableComponent):
    """Displays the sub-groups and leaves of one group."""

    def setup(self, group: Optional[Unit], depth: int = DEFAULT_DEPTH) -> 'GroupChildrenView':
        self.group = group
        self.depth = depth
        self.helper = self._new_helper(depth, False)
        self._validity = None
        return self

    def get_key(self) -> str:
        self._require_setup()
        if self.group is None:
            # No group to show; nothing meaningful to key on
            return "0"
        return fingerprint(self.group.handle, self.depth)

    def compute_validity(self) -> ValidityOutcome:
        if self.group is None or not self.group.is_group():
            return ValidityOutcome.uncacheable(ValueError("No group to display"))

        try:
            leaves = self.helper.cache.builder.leaves_of(self.group)
        except RetrievalFailure as e:
            logger.warning("Children of %r unavailable, treating as uncacheable: %s", self.group, e)
            return ValidityOutcome.uncacheable(e)

        extra = (self.group.validity_token(),) + tuple(u.validity_token() for u in leaves)
        return self.helper.validity(parent=self.group, extra_tokens=extra)

    def render(self, base_path: str = "") -> Optional[ReferenceGroup]:
        """Render the group's sub-tree followed by its direct leaves.

        Returns:
            None if there is no group or it has no children

        Raises:
            RetrievalFailure: If the hierarchy cannot be built
        """
        self._require_setup()
        if self.group is None or not self.group.is_group():
            return None

        builder = self.helper.cache.builder
        if not builder.has_children(self.group):
            return None

        into = ReferenceGroup(kind="children")
        self.helper.make_reference_set(into, parent=self.group)
        for unit in builder.leaves_of(self.group):
            into.add_reference(unit)
        return into

"""Core abstractions for communitytree.

This package contains the unit/node model, the store adapter contracts,
tree construction, the two projections and the validity walk.
"""

from .node import Unit, UnitType, TreeNode
from .adapter import UnitStore, ItemCounter
from .builder import TreeBuilder, list_top_level_groups
from .projection import (
    Reference,
    ReferenceGroup,
    LinkItem,
    NestedList,
    ReferenceProjection,
    ListProjection,
)
from .validity import (
    CacheDescriptor,
    ValidityOutcome,
    ValidityAccumulator,
    fingerprint,
)

__all__ = [
    "Unit",
    "UnitType",
    "TreeNode",
    "UnitStore",
    "ItemCounter",
    "TreeBuilder",
    "list_top_level_groups",
    "Reference",
    "ReferenceGroup",
    "LinkItem",
    "NestedList",
    "ReferenceProjection",
    "ListProjection",
    "CacheDescriptor",
    "ValidityOutcome",
    "ValidityAccumulator",
    "fingerprint",
]

"""communitytree - group/leaf hierarchy trees with cache validity.

communitytree turns a forest of nested groups (community-like containers)
holding leaves (collection-like units) into a depth-bounded tree, projects
that tree onto reference groupings or nested link lists, and computes cache
descriptors so a rendering can be reused until the hierarchy changes.

Typical use, one helper per request:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    helper = CommunityTreeHelper(store, depth=2)
    listing = helper.make_list("/repo", NestedList("browser"))
    descriptor = helper.validity().descriptor
    helper.reset()
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .config import DEFAULT_DEPTH, HierarchyConfig, parse_duration
from .errors import (
    CommunityTreeError,
    RetrievalFailure,
    MetricFailure,
    ConfigurationError,
    ConcurrentUseError,
)
from .core import (
    Unit,
    UnitType,
    TreeNode,
    UnitStore,
    ItemCounter,
    TreeBuilder,
    Reference,
    ReferenceGroup,
    LinkItem,
    NestedList,
    ReferenceProjection,
    ListProjection,
    CacheDescriptor,
    ValidityOutcome,
    ValidityAccumulator,
    fingerprint,
)
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    SkipMetricPolicy,
    CollectErrorsPolicy,
)
from .helper import CommunityTreeHelper, TreeCache
from .components import CacheableComponent, HierarchyBrowser, GroupChildrenView
from .caching import ProjectionCache
from .api import (
    build_tree,
    reference_groups,
    nested_list,
    compute_validity,
    cache_key,
)

__all__ = [
    "__version__",
    # Config
    "DEFAULT_DEPTH",
    "HierarchyConfig",
    "parse_duration",
    # Errors
    "CommunityTreeError",
    "RetrievalFailure",
    "MetricFailure",
    "ConfigurationError",
    "ConcurrentUseError",
    # Core
    "Unit",
    "UnitType",
    "TreeNode",
    "UnitStore",
    "ItemCounter",
    "TreeBuilder",
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
    # Policies
    "ErrorPolicy",
    "FailFastPolicy",
    "SkipMetricPolicy",
    "CollectErrorsPolicy",
    # Helper and components
    "CommunityTreeHelper",
    "TreeCache",
    "CacheableComponent",
    "HierarchyBrowser",
    "GroupChildrenView",
    "ProjectionCache",
    # API
    "build_tree",
    "reference_groups",
    "nested_list",
    "compute_validity",
    "cache_key",
]

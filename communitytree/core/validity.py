"""Cache validity for built trees.

A CacheDescriptor lists one invalidation token per unit in a tree, plus
optional ``size:<n>`` tokens, plus an optional assumed-valid duration. A
consuming cache treats any change in the token sequence as "must
recompute", unless the stored result is still inside its assumed-valid
window.
"""

import hashlib
from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional, Tuple

from ..config import HierarchyConfig
from ..error_policies import ErrorPolicy, SkipMetricPolicy
from .adapter import ItemCounter
from .node import TreeNode


def fingerprint(*parts) -> str:
    """Deterministic cache key for a component's parameters.

    Booleans are rendered as ``true``/``false`` so keys do not depend on
    Python's spelling of them.
    """
    rendered = []
    for part in parts:
        if isinstance(part, bool):
            rendered.append("true" if part else "false")
        else:
            rendered.append(str(part))
    return hashlib.sha1("-".join(rendered).encode('utf-8')).hexdigest()


@dataclass(frozen=True)
class CacheDescriptor:
    """Invalidation tokens and validity override for one tree."""

    tokens: Tuple[str, ...] = ()
    assumed_valid: Optional[timedelta] = None
    omitted_sizes: int = 0

    def digest(self) -> str:
        """Stable SHA-1 hex digest of the token sequence."""
        sha = hashlib.sha1()
        for token in self.tokens:
            sha.update(token.encode('utf-8'))
            sha.update(b'\0')
        return sha.hexdigest()

    def is_valid(self, other: 'CacheDescriptor') -> bool:
        """Check whether a result stored under ``self`` is still valid for ``other``."""
        return self.tokens == other.tokens

    def assumes_valid_at(self, stored_at: float, now: float) -> bool:
        """Check whether ``now`` is inside the assumed-valid window.

        Args:
            stored_at: Timer value when the result was stored (seconds)
            now: Current timer value (seconds)
        """
        if self.assumed_valid is None:
            return False
        return now - stored_at < self.assumed_valid.total_seconds()

    @property
    def identity_tokens(self) -> List[str]:
        return [t for t in self.tokens if not t.startswith('size:')]

    @property
    def size_tokens(self) -> List[str]:
        return [t for t in self.tokens if t.startswith('size:')]


@dataclass(frozen=True)
class ValidityOutcome:
    """Result of a validity request: a descriptor, or why there is none.

    An outcome without a descriptor is uncacheable. It must never be read as
    "valid forever".
    """

    descriptor: Optional[CacheDescriptor] = None
    failure: Optional[Exception] = field(default=None, compare=False)

    @property
    def cacheable(self) -> bool:
        return self.descriptor is not None

    @classmethod
    def ok(cls, descriptor: CacheDescriptor) -> 'ValidityOutcome':
        return cls(descriptor=descriptor)

    @classmethod
    def uncacheable(cls, failure: Exception) -> 'ValidityOutcome':
        return cls(failure=failure)


class ValidityAccumulator:
    """Walks a built tree once and produces its CacheDescriptor."""

    def __init__(self,
                 config: Optional[HierarchyConfig] = None,
                 metric_policy: Optional[ErrorPolicy] = None):
        """Initialize accumulator.

        Args:
            config: Supplies ``cache_item_counts`` and the assumed-valid duration
            metric_policy: Handles counter failures (default SkipMetricPolicy)
        """
        self.config = config or HierarchyConfig()
        self.metric_policy = metric_policy or SkipMetricPolicy()

    def accumulate(self,
                   tree: TreeNode,
                   item_counter: Optional[ItemCounter] = None,
                   extra_tokens: Tuple[str, ...] = ()) -> CacheDescriptor:
        """Collect tokens for every node of ``tree``.

        Args:
            tree: Root of a built tree (the sentinel contributes no token)
            item_counter: Source of ``size:<n>`` tokens, used only when
                ``cache_item_counts`` is enabled
            extra_tokens: Tokens appended after the walk

        Returns:
            CacheDescriptor for the tree
        """
        count_items = self.config.cache_item_counts and item_counter is not None
        tokens: List[str] = []
        omitted = 0

        stack = [tree]
        while stack:
            node = stack.pop()

            if node.unit is not None:
                tokens.append(node.unit.validity_token())

                if count_items:
                    try:
                        size = item_counter.count(node.unit)
                    except Exception as e:
                        self.metric_policy.handle(e, node.unit)
                        omitted += 1
                    else:
                        tokens.append(f"size:{size}")

            stack.extend(node.children)

        tokens.extend(extra_tokens)

        return CacheDescriptor(
            tokens=tuple(tokens),
            assumed_valid=self.config.assumed_valid_delta,
            omitted_sizes=omitted,
        )

"""Tree construction for communitytree.

The builder expands groups with an explicit work stack. Expansion order is
last-pushed-first, so deeper groups under the most recently discovered
sibling are expanded before earlier siblings. Children lists are filled in
discovery order regardless, so the expansion order only shows up in the
order store calls are made.
"""

import logging
from typing import Iterable, List, Sequence

from ..errors import RetrievalFailure
from .adapter import UnitStore
from .node import TreeNode, Unit

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builds a depth-bounded TreeNode forest from root groups."""

    def __init__(self, store: UnitStore):
        """Initialize builder with a store.

        Args:
            store: UnitStore for enumerating sub-groups and leaves
        """
        self.store = store

    def build(self,
              roots: Iterable[Unit],
              max_depth: int,
              exclude_leaves: bool = False) -> TreeNode:
        """Build a tree below a synthetic root.

        Each root unit becomes a level-1 node. A group node is expanded
        only while its level is below ``max_depth``; nodes at the limit stay
        in the tree unexpanded. Leaves are attached directly and never
        expanded.

        Args:
            roots: Groups to place at level 1
            max_depth: Deepest level that may still be reached by expansion
            exclude_leaves: Leave leaf units out of the tree entirely

        Returns:
            The synthetic root node (level 0, no unit)

        Raises:
            RetrievalFailure: If the store fails at any point
            ValueError: If a root is not a group
        """
        root = TreeNode()
        stack: List[TreeNode] = []

        for unit in roots:
            if not unit.is_group():
                raise ValueError(f"Root unit {unit.identifier()!r} is not a group")
            stack.append(root.add_child(unit))

        while stack:
            node = stack.pop()

            if node.level >= max_depth:
                continue

            # Only group nodes are ever pushed
            group = node.unit
            for sub_group in self._retrieve(self.store.get_sub_groups, group):
                stack.append(node.add_child(sub_group))

            if not exclude_leaves:
                for leaf in self._retrieve(self.store.get_leaves, group):
                    node.add_child(leaf)

        logger.debug(
            "Built tree with %d nodes (max_depth=%d, exclude_leaves=%s)",
            root.count() - 1, max_depth, exclude_leaves,
        )
        return root

    def sub_groups_of(self, group: Unit) -> Sequence[Unit]:
        """Sub-groups of ``group``, with store errors as RetrievalFailure."""
        return self._retrieve(self.store.get_sub_groups, group)

    def leaves_of(self, group: Unit) -> Sequence[Unit]:
        """Leaves of ``group``, with store errors as RetrievalFailure."""
        return self._retrieve(self.store.get_leaves, group)

    def has_children(self, group: Unit) -> bool:
        """Whether ``group`` holds anything, with store errors as RetrievalFailure."""
        try:
            return self.store.has_children(group)
        except RetrievalFailure:
            raise
        except Exception as e:
            raise RetrievalFailure(
                f"has_children failed for {group.identifier()!r}: {e}",
                unit=group,
                operation="has_children",
            ) from e

    def _retrieve(self, operation, group: Unit) -> Sequence[Unit]:
        name = getattr(operation, '__name__', 'store operation')
        try:
            return list(operation(group))
        except RetrievalFailure:
            raise
        except Exception as e:
            raise RetrievalFailure(
                f"{name} failed for {group.identifier()!r}: {e}",
                unit=group,
                operation=name,
            ) from e


def list_top_level_groups(store: UnitStore) -> List[Unit]:
    """List top-level groups, wrapping store errors in RetrievalFailure."""
    try:
        return list(store.list_top_level_groups())
    except RetrievalFailure:
        raise
    except Exception as e:
        raise RetrievalFailure(
            f"list_top_level_groups failed: {e}",
            operation="list_top_level_groups",
        ) from e

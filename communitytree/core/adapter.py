"""Collaborator abstractions for communitytree.

The UnitStore adapter supplies the hierarchy; the ItemCounter supplies the
optional per-unit item counts folded into cache descriptors. Both are
implemented outside the library (see ``adapters.memory`` for a reference
in-memory implementation).
"""

from abc import ABC, abstractmethod
from typing import Sequence

from .node import Unit


class UnitStore(ABC):
    """Abstract adapter for navigating a group/leaf hierarchy.

    Implementations should raise RetrievalFailure when the backing store is
    unavailable. Any other exception escaping these methods is wrapped in a
    RetrievalFailure by the tree builder.
    """

    @abstractmethod
    def list_top_level_groups(self) -> Sequence[Unit]:
        """Return every group that has no parent group."""
        pass

    @abstractmethod
    def get_sub_groups(self, group: Unit) -> Sequence[Unit]:
        """Return the direct sub-groups of ``group`` in store order."""
        pass

    @abstractmethod
    def get_leaves(self, group: Unit) -> Sequence[Unit]:
        """Return the leaves held directly by ``group`` in store order."""
        pass

    def has_children(self, group: Unit) -> bool:
        """Check whether ``group`` holds any sub-group or leaf.

        Default implementation asks for both sequences.
        """
        return bool(self.get_sub_groups(group)) or bool(self.get_leaves(group))


class ItemCounter(ABC):
    """Abstract source of per-unit item counts."""

    @abstractmethod
    def count(self, unit: Unit) -> int:
        """Return the number of items held under ``unit``.

        Raises:
            MetricFailure: If the count cannot be determined
        """
        pass

"""Unit and TreeNode abstractions for communitytree.

A Unit is an object supplied by an external store: a Group that can hold
sub-groups and leaves, or a terminal Leaf. A TreeNode records one unit's
position in one particular traversal. Navigation (which sub-groups and
leaves a group has) is delegated to the UnitStore adapter.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional, Tuple


class UnitType(Enum):
    """Kind of unit held by a tree node."""
    GROUP = "group"     # Community-like container
    LEAF = "leaf"       # Collection-like terminal unit


class Unit(ABC):
    """Abstract base class for units in a group/leaf hierarchy.

    Units are borrowed from the store for the duration of a traversal; the
    tree never mutates them.
    """

    @abstractmethod
    def identifier(self) -> str:
        """Return a stable identifier for this unit.

        The identifier must be unique among units of the same type and
        stable across traversals. It is used in invalidation tokens and
        sub-list names.
        """
        pass

    @property
    @abstractmethod
    def handle(self) -> str:
        """Stable external handle, used to build links."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name."""
        pass

    @property
    @abstractmethod
    def unit_type(self) -> UnitType:
        """Whether this unit is a group or a leaf."""
        pass

    def is_group(self) -> bool:
        return self.unit_type is UnitType.GROUP

    def is_leaf(self) -> bool:
        return self.unit_type is UnitType.LEAF

    def validity_token(self) -> str:
        """Return the invalidation token for this unit."""
        return f"{self.unit_type.value}:{self.identifier()}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.identifier()!r}, type={self.unit_type.value})"

    def __eq__(self, other: object) -> bool:
        """Units are equal if they have the same type and identifier."""
        if not isinstance(other, Unit):
            return NotImplemented
        return (self.unit_type, self.identifier()) == (other.unit_type, other.identifier())

    def __hash__(self) -> int:
        return hash((self.unit_type, self.identifier()))


class TreeNode:
    """One unit's position in a built tree.

    The root of every built tree is a synthetic sentinel at level 0 with no
    unit. Children are kept in discovery order.
    """

    __slots__ = ('unit', 'level', 'children')

    def __init__(self, unit: Optional[Unit] = None, level: int = 0):
        self.unit = unit
        self.level = level
        self.children: List['TreeNode'] = []

    def add_child(self, unit: Unit) -> 'TreeNode':
        """Attach a child for ``unit`` one level below this node.

        Returns:
            The new child node

        Raises:
            ValueError: If this node holds a leaf
        """
        if self.unit is not None and self.unit.is_leaf():
            raise ValueError(f"Leaf {self.unit.identifier()!r} cannot have children")
        child = TreeNode(unit, self.level + 1)
        self.children.append(child)
        return child

    def partition_children(self) -> Tuple[List['TreeNode'], List['TreeNode']]:
        """Split children into ``(groups, leaves)``, each in discovery order."""
        groups: List[TreeNode] = []
        leaves: List[TreeNode] = []
        for child in self.children:
            if child.unit.is_leaf():
                leaves.append(child)
            else:
                groups.append(child)
        return groups, leaves

    def walk(self):
        """Yield every node of this subtree once, parent before children."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count(self) -> int:
        """Number of nodes in this subtree, including this one."""
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        label = self.unit.identifier() if self.unit is not None else '<root>'
        return f"TreeNode({label!r}, level={self.level}, children={len(self.children)})"

"""In-memory adapter for communitytree.

This adapter keeps a whole group/leaf hierarchy in Python objects. It is
the reference UnitStore implementation, used by the test fixtures and handy
for prototyping a view before wiring a real repository backend.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ..core.adapter import ItemCounter, UnitStore
from ..core.node import Unit, UnitType
from ..errors import MetricFailure, RetrievalFailure


class MemoryUnit(Unit):
    """Concrete unit held in memory.

    Groups keep their sub-groups and leaves in insertion order. Leaves hold
    nothing.
    """

    def __init__(self,
                 handle: str,
                 name: Optional[str] = None,
                 unit_type: UnitType = UnitType.GROUP,
                 identifier: Optional[str] = None):
        """Initialize a unit.

        Args:
            handle: Stable external handle
            name: Display name (defaults to the handle)
            unit_type: GROUP or LEAF
            identifier: Stable identifier (defaults to the handle)
        """
        self._handle = handle
        self._name = name if name is not None else handle
        self._unit_type = unit_type
        self._identifier = identifier if identifier is not None else handle
        self.parent: Optional['MemoryUnit'] = None
        self.sub_groups: List['MemoryUnit'] = []
        self.leaves: List['MemoryUnit'] = []

    def identifier(self) -> str:
        return self._identifier

    @property
    def handle(self) -> str:
        return self._handle

    @property
    def name(self) -> str:
        return self._name

    @property
    def unit_type(self) -> UnitType:
        return self._unit_type

    def add_group(self, unit: 'MemoryUnit') -> 'MemoryUnit':
        """Attach ``unit`` as a sub-group of this group."""
        self._check_container()
        if not unit.is_group():
            raise ValueError(f"{unit.identifier()!r} is not a group")
        unit.parent = self
        self.sub_groups.append(unit)
        return unit

    def add_leaf(self, unit: 'MemoryUnit') -> 'MemoryUnit':
        """Attach ``unit`` as a leaf of this group."""
        self._check_container()
        if not unit.is_leaf():
            raise ValueError(f"{unit.identifier()!r} is not a leaf")
        unit.parent = self
        self.leaves.append(unit)
        return unit

    def _check_container(self) -> None:
        if self.is_leaf():
            raise ValueError(f"Leaf {self.identifier()!r} cannot hold children")

    def __repr__(self) -> str:
        return f"MemoryUnit(handle={self._handle!r}, type={self._unit_type.value})"


def group(handle: str, name: Optional[str] = None, **kwargs) -> MemoryUnit:
    """Create a group unit."""
    return MemoryUnit(handle, name, UnitType.GROUP, **kwargs)


def leaf(handle: str, name: Optional[str] = None, **kwargs) -> MemoryUnit:
    """Create a leaf unit."""
    return MemoryUnit(handle, name, UnitType.LEAF, **kwargs)


class InMemoryUnitStore(UnitStore):
    """UnitStore over MemoryUnit objects.

    Top-level groups are those registered with ``add_top_level`` (or passed
    to the constructor). ``available`` can be switched off to simulate an
    unreachable backend; every call then raises RetrievalFailure.
    """

    def __init__(self, top_level: Iterable[MemoryUnit] = ()):
        self.top_level: List[MemoryUnit] = []
        self.available = True
        self.calls: List[str] = []
        for unit in top_level:
            self.add_top_level(unit)

    def add_top_level(self, unit: MemoryUnit) -> MemoryUnit:
        if not unit.is_group():
            raise ValueError(f"{unit.identifier()!r} is not a group")
        self.top_level.append(unit)
        return unit

    def list_top_level_groups(self) -> Sequence[Unit]:
        self._check_available("list_top_level_groups")
        return list(self.top_level)

    def get_sub_groups(self, group: Unit) -> Sequence[Unit]:
        self._check_available("get_sub_groups", group)
        self.calls.append(f"sub_groups:{group.identifier()}")
        return list(getattr(group, 'sub_groups', ()))

    def get_leaves(self, group: Unit) -> Sequence[Unit]:
        self._check_available("get_leaves", group)
        self.calls.append(f"leaves:{group.identifier()}")
        return list(getattr(group, 'leaves', ()))

    def has_children(self, group: Unit) -> bool:
        self._check_available("has_children", group)
        return bool(getattr(group, 'sub_groups', ()) or getattr(group, 'leaves', ()))

    def find(self, handle: str) -> Optional[MemoryUnit]:
        """Find a unit anywhere in the store by handle."""
        stack = list(self.top_level)
        while stack:
            unit = stack.pop()
            if unit.handle == handle:
                return unit
            stack.extend(unit.sub_groups)
            stack.extend(unit.leaves)
        return None

    def _check_available(self, operation: str, unit: Optional[Unit] = None) -> None:
        if not self.available:
            raise RetrievalFailure(
                f"Store unavailable during {operation}",
                unit=unit,
                operation=operation,
            )


class MappingItemCounter(ItemCounter):
    """Item counter backed by a handle -> count mapping.

    Units missing from the mapping raise MetricFailure, as a real counter
    does for units it has no statistics for.
    """

    def __init__(self, counts: Mapping[str, int]):
        self.counts: Dict[str, int] = dict(counts)

    def count(self, unit: Unit) -> int:
        try:
            return self.counts[unit.handle]
        except KeyError:
            raise MetricFailure(f"No item count for {unit.handle!r}", unit=unit) from None

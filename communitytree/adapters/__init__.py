"""Unit store adapters for communitytree."""

from .memory import (
    MemoryUnit,
    InMemoryUnitStore,
    MappingItemCounter,
    group,
    leaf,
)

__all__ = [
    'MemoryUnit',
    'InMemoryUnitStore',
    'MappingItemCounter',
    'group',
    'leaf',
]

"""Testing utilities for communitytree consumers."""

from .fixtures import build_store, tree_shape, levels_by_handle

__all__ = ['build_store', 'tree_shape', 'levels_by_handle']

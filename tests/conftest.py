"""Shared fixtures for communitytree tests."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from communitytree.testing import build_store


@pytest.fixture
def forest():
    """Group A (a1, Group B (b1)).

    Structure:
    a/
    ├── a1
    └── b/
        └── b1
    """
    return {"a": ["a1", {"b": ["b1"]}]}


@pytest.fixture
def store(forest):
    return build_store(forest)


class Clock:
    """Manually advanced timer for cache tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return Clock()

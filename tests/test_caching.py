"""Tests for the projection cache.

Each ``serve`` call stands for one request, so the component is recycled
between calls the way a request pipeline would.
"""

import pytest

from communitytree import (
    GroupChildrenView,
    HierarchyBrowser,
    HierarchyConfig,
    ProjectionCache,
    RetrievalFailure,
)
from communitytree.adapters import leaf


def _request(cache, component, base_path="/repo"):
    try:
        return cache.serve(component, base_path)
    finally:
        component.recycle()


def test_unchanged_hierarchy_is_served_from_cache(store, clock):
    cache = ProjectionCache(timer=clock)
    browser = HierarchyBrowser(store).setup()

    first = _request(cache, browser)
    second = _request(cache, browser)

    assert second is first
    assert cache.get_statistics()["hits"] == 1
    assert cache.get_statistics()["stores"] == 1


def test_changed_hierarchy_is_rerendered(store, clock):
    cache = ProjectionCache(timer=clock)
    browser = HierarchyBrowser(store).setup()

    first = _request(cache, browser)
    store.find("b").add_leaf(leaf("b2"))
    second = _request(cache, browser)

    assert second is not first
    assert cache.misses == 2
    assert len(cache) == 1


def test_assumed_valid_window_skips_validity(store, clock):
    cache = ProjectionCache(timer=clock)
    config = HierarchyConfig(assumed_valid_duration="10 minutes")
    browser = HierarchyBrowser(store, config).setup()

    first = _request(cache, browser)
    store.find("b").add_leaf(leaf("b2"))
    clock.advance(300)
    second = _request(cache, browser)

    assert second is first
    assert browser.helper.cache.builds == 1

    clock.advance(301)
    third = _request(cache, browser)

    assert third is not first
    assert browser.helper.cache.builds == 2


def test_entries_expire_after_ttl(store, clock):
    cache = ProjectionCache(ttl=60, timer=clock)
    browser = HierarchyBrowser(store).setup()

    first = _request(cache, browser)
    clock.advance(61)
    second = _request(cache, browser)

    assert second is not first
    assert cache.hits == 0


def test_base_path_is_part_of_key(store, clock):
    cache = ProjectionCache(timer=clock)
    browser = HierarchyBrowser(store, HierarchyConfig(render_full=False)).setup()

    repo = _request(cache, browser, "/repo")
    other = _request(cache, browser, "/other")

    assert repo.items[0].target == "/repo/handle/a"
    assert other.items[0].target == "/other/handle/a"
    assert len(cache) == 2


def test_uncacheable_output_is_not_stored(store, clock):
    cache = ProjectionCache(timer=clock)
    view = GroupChildrenView(store).setup(None)

    assert _request(cache, view) is None
    assert len(cache) == 0
    assert cache.uncacheable == 1


def test_retrieval_failure_propagates_from_render(store, clock):
    cache = ProjectionCache(timer=clock)
    browser = HierarchyBrowser(store).setup()
    store.available = False

    with pytest.raises(RetrievalFailure):
        _request(cache, browser)
    assert len(cache) == 0


def test_invalidate_and_clear(store, clock):
    cache = ProjectionCache(timer=clock)
    browser = HierarchyBrowser(store).setup()
    _request(cache, browser, "/repo")
    _request(cache, browser, "/other")

    assert cache.invalidate(browser.get_key()) == 2
    assert len(cache) == 0

    _request(cache, browser)
    cache.clear()
    assert len(cache) == 0

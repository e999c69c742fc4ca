#!/usr/bin/env python3
"""
Serve a repository hierarchy view through the projection cache.

This example demonstrates:
- Building an in-memory hierarchy of groups and leaves
- Rendering it as nested links with a HierarchyBrowser
- Reusing the rendering while the hierarchy is unchanged
- Re-rendering once a leaf is added
"""

import json
import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from communitytree import HierarchyBrowser, HierarchyConfig, ProjectionCache
from communitytree.adapters import InMemoryUnitStore, MappingItemCounter, group, leaf


def build_repository() -> InMemoryUnitStore:
    """Two faculties, one with a nested department."""
    science = group("123/1", "Faculty of Science")
    science.add_leaf(leaf("123/10", "Theses"))
    physics = science.add_group(group("123/2", "Department of Physics"))
    physics.add_leaf(leaf("123/20", "Preprints"))

    arts = group("123/3", "Faculty of Arts")
    arts.add_leaf(leaf("123/30", "Exhibitions"))

    return InMemoryUnitStore([science, arts])


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    store = build_repository()
    counts = MappingItemCounter({"123/10": 42, "123/20": 7, "123/30": 3})
    config = HierarchyConfig.from_properties({
        "cache-item-counts": "true",
        "render-full": "false",
    })
    cache = ProjectionCache(max_size=100, ttl=600)

    for request in range(3):
        if request == 2:
            store.find("123/3").add_leaf(leaf("123/31", "Performances"))

        browser = HierarchyBrowser(store, config, item_counter=counts).setup(depth=3)
        try:
            view = cache.serve(browser, "/repo")
        finally:
            browser.recycle()

        print(f"\n=== Request {request + 1} ===")
        print(json.dumps(view.to_dict(), indent=2))

    print("\nCache statistics:", cache.get_statistics())


if __name__ == "__main__":
    main()

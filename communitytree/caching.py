"""
Projection cache for communitytree.

Stores rendered projections keyed by component key and base path, and
decides on each request whether a stored rendering is still usable:

1. Inside the descriptor's assumed-valid window: reuse without asking the
   component for validity.
2. Otherwise: compare the stored tokens with a fresh descriptor.
3. Uncacheable outcomes are rendered but never stored.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from cachetools import TTLCache

from .components import CacheableComponent
from .core.validity import CacheDescriptor

logger = logging.getLogger(__name__)


@dataclass
class CachedRendering:
    """A stored rendering and the descriptor it was stored under."""
    output: Any
    descriptor: CacheDescriptor
    stored_at: float


class ProjectionCache:
    """
    TTL- and size-bounded cache of component renderings.

    Example:
        cache = ProjectionCache(max_size=500, ttl=3600)
        browser = HierarchyBrowser(store, config).setup(depth=2)
        view = cache.serve(browser, "/repo")
        browser.recycle()
    """

    def __init__(self,
                 max_size: int = 1000,
                 ttl: float = 3600.0,
                 timer: Callable[[], float] = time.monotonic):
        """
        Initialize projection cache.

        Args:
            max_size: Maximum number of stored renderings
            ttl: Hard upper bound on an entry's lifetime in seconds
            timer: Clock used for both TTL expiry and assumed-valid windows
        """
        self._timer = timer
        self._cache = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.uncacheable = 0

    def serve(self, component: CacheableComponent, base_path: str = "") -> Any:
        """
        Return the component's rendering, from cache when still valid.

        Raises:
            RetrievalFailure: If a fresh rendering is needed and the
                hierarchy cannot be built
        """
        key = self._get_cache_key(component, base_path)
        entry: Optional[CachedRendering] = self._cache.get(key)

        if entry is not None:
            if entry.descriptor.assumes_valid_at(entry.stored_at, self._timer()):
                self.hits += 1
                logger.debug("Assumed-valid hit for %s", key)
                return entry.output

            outcome = component.validity()
            if outcome.cacheable and entry.descriptor.is_valid(outcome.descriptor):
                self.hits += 1
                logger.debug("Validated hit for %s", key)
                return entry.output

            self._cache.pop(key, None)

        self.misses += 1
        output = component.render(base_path)

        outcome = component.validity()
        if outcome.cacheable:
            self._cache[key] = CachedRendering(output, outcome.descriptor, self._timer())
            self.stores += 1
        else:
            self.uncacheable += 1
            logger.debug("Not caching %s: %s", key, outcome.failure)

        return output

    def invalidate(self, key: Hashable) -> int:
        """
        Drop every stored rendering for a component key.

        Args:
            key: Value returned by the component's ``get_key()``

        Returns:
            Number of entries removed
        """
        doomed = [k for k in list(self._cache.keys()) if k[0] == key]
        for k in doomed:
            self._cache.pop(k, None)
        return len(doomed)

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def get_statistics(self) -> Dict[str, Any]:
        total = self.hits + self.misses
        return {
            'hits': self.hits,
            'misses': self.misses,
            'stores': self.stores,
            'uncacheable': self.uncacheable,
            'hit_rate': self.hits / total if total else 0.0,
            'entries': len(self._cache),
        }

    def _get_cache_key(self, component: CacheableComponent, base_path: str) -> Tuple[str, str]:
        return (component.get_key(), base_path)

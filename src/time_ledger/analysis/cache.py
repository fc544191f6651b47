"""Caller-controlled memoization of report computations."""

import logging
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReportCache:
    """Bounded LRU cache keyed by snapshot and call arguments.

    Snapshots are frozen, so equal snapshots hash equally and a recomputation
    over an unchanged snapshot is served from the cache. Callers decide what
    goes into the key; include the reference day for anything relative to
    "now".
    """

    def __init__(self, max_size: int = 128):
        """Initialize cache.

        Args:
            max_size: Number of results kept before the oldest is evicted
        """
        if max_size < 1:
            raise ValueError("Cache size must be at least 1")
        self.max_size = max_size
        self._items: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing it on a miss."""
        if key in self._items:
            self._items.move_to_end(key)
            self.hits += 1
            logger.debug(f"Report cache hit ({self.hits} hits, {self.misses} misses)")
            value: T = self._items[key]
            return value

        self.misses += 1
        logger.debug(f"Report cache miss ({self.hits} hits, {self.misses} misses)")
        value = compute()
        self._items[key] = value
        if len(self._items) > self.max_size:
            self._items.popitem(last=False)
        return value

    def clear(self) -> None:
        """Drop every cached result."""
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

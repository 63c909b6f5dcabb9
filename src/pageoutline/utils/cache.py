"""Bounded in-memory cache."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LRUCache(Generic[K, V]):
    """LRU (Least Recently Used) cache with hit/miss counters.

    Instances are meant to live for a single compression call; nothing here is shared
    between calls.
    """

    def __init__(self, max_size: int = 1000):
        """Initialize LRU cache.

        Args:
            max_size: Maximum number of items to cache.
        """
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.cache: OrderedDict[K, V] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> V | None:
        """Get item from cache."""
        if key not in self.cache:
            self.misses += 1
            return None
        self.hits += 1
        self.cache.move_to_end(key)
        return self.cache[key]

    def put(self, key: K, value: V) -> None:
        """Put item in cache, evicting the least recently used entry when full."""
        if key in self.cache:
            self.cache.move_to_end(key)
        elif len(self.cache) >= self.max_size:
            self.cache.popitem(last=False)
        self.cache[key] = value

    def clear(self) -> None:
        """Clear all items and counters."""
        self.cache.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self.cache)

    def __contains__(self, key: object) -> bool:
        return key in self.cache

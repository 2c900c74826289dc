"""Bounded in-memory cache with least-recently-used eviction.

One instance is created per kind of cached value (detail entries, search
summaries, index pages), each with its own capacity. The cache performs no
I/O and never suspends, so it is safe to share between coroutines running
on the same event loop without locking.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterator
from typing import Generic, TypeVar

import structlog

log = structlog.get_logger()

T = TypeVar("T")


class BoundedCache(Generic[T]):
    """Key → value store holding at most ``capacity`` entries.

    Recency order is kept by the underlying ``OrderedDict``: the first key is
    the least recently used, the last key the most recently used.
    """

    def __init__(self, capacity: int, *, name: str = "cache") -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._name = name
        self._data: OrderedDict[str, T] = OrderedDict()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: str) -> T | None:
        """Return the value for ``key`` and mark it most recently used."""
        if key not in self._data:
            return None
        self._data.move_to_end(key)
        return self._data[key]

    def set(self, key: str, value: T) -> None:
        """Insert or replace ``key``, evicting the LRU entry when full."""
        if key in self._data:
            self._data.move_to_end(key)
        elif len(self._data) >= self._capacity:
            evicted, _ = self._data.popitem(last=False)
            log.debug("cache_evict", cache=self._name, key=evicted)
        self._data[key] = value

    def has(self, key: str) -> bool:
        """Membership test. Does not change recency."""
        return key in self._data

    def clear(self) -> None:
        self._data.clear()

    def size(self) -> int:
        return len(self._data)

    def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

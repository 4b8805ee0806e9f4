"""Per-cache counters for weak-cache traffic.

Tracks lookups (hits / misses) and removals (collector evictions /
explicit deletions) for named caches.  Thread-safe: eviction counts are
recorded from finalizer callbacks that may run on any thread.
"""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass


@dataclass(frozen=True)
class CacheStats:
    """Immutable snapshot of cache statistics."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    deletions: int = 0

    @property
    def total(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate as a float in [0.0, 1.0]; 0.0 when no requests."""
        if self.total == 0:
            return 0.0
        return self.hits / self.total


_FIELDS = ("hits", "misses", "evictions", "deletions")


class CacheStatsCollector:
    """Thread-safe collector shared by one or more :class:`WeakCache`.

    Usage::

        stats = CacheStatsCollector()
        cache = WeakCache(name="sessions", stats=stats)
        ...
        print(stats.get("sessions").hit_rate)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, Counter[str]] = {}

    def _bump(self, cache_name: str, field: str) -> None:
        with self._lock:
            self._counters.setdefault(cache_name, Counter())[field] += 1

    def record_hit(self, cache_name: str) -> None:
        self._bump(cache_name, "hits")

    def record_miss(self, cache_name: str) -> None:
        self._bump(cache_name, "misses")

    def record_eviction(self, cache_name: str) -> None:
        """Record a collector-driven eviction for *cache_name*."""
        self._bump(cache_name, "evictions")

    def record_deletion(self, cache_name: str) -> None:
        self._bump(cache_name, "deletions")

    def _snapshot(self, cache_name: str) -> CacheStats:
        counts = self._counters.get(cache_name, Counter())
        return CacheStats(**{name: counts[name] for name in _FIELDS})

    def get(self, cache_name: str) -> CacheStats:
        """Return a :class:`CacheStats` snapshot for *cache_name*."""
        with self._lock:
            return self._snapshot(cache_name)

    def all(self) -> dict[str, CacheStats]:
        """Return snapshots for every cache that has recorded data."""
        with self._lock:
            return {name: self._snapshot(name) for name in sorted(self._counters)}

    def reset(self, cache_name: str | None = None) -> None:
        """Reset counters.  If *cache_name* is ``None``, reset all."""
        with self._lock:
            if cache_name is None:
                self._counters.clear()
            else:
                self._counters.pop(cache_name, None)

"""Weak-valued cache that evicts entries when their values are collected.

Values are held through weak references only, so the cache never keeps
anything alive on its own.  Once the garbage collector reclaims a value
whose key is still cached, the entry is removed and the optional
``on_evict`` hook is called with the key.  Lookups that stumble on a dead
reference before the collector callback has run purge the entry on the
spot.

Each ``set`` subscribes a finalizer tagged with a fresh token.  The
finalizer only acts when the table still holds the entry carrying that
token, so a value replaced by a later ``set`` (or removed by ``delete``)
can never evict the key's current entry.
"""

from __future__ import annotations

import itertools
import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Mapping, TypeVar

from ...config import DEFAULT_CACHE_NAME, EVICTION_ERROR_SEVERITY
from ...errors import EvictionCallbackError, InvalidValueType
from ...errors.handler import ErrorHandler
from ...events.bus import EventBus
from ...events.cache_events import EntryDeletedEvent, EntryEvictedEvent
from ...settings.schema import merge_with_defaults
from ..gc_runtime import FinalizationHandle, GcRuntime, ReferenceRuntime, WeakHandle
from .cache_stats import CacheStatsCollector

LOGGER = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

EvictCallback = Callable[[Any], None]


@dataclass
class CacheEntry:
    """Table slot: weak handle plus the finalizer subscription guarding it."""

    ref: WeakHandle
    handle: FinalizationHandle
    token: int


def _collected(cache_ref: weakref.ref, key: Any, token: int) -> None:
    # Finalizer payload holds the cache weakly; a dead cache has nothing
    # left to clean up.
    cache = cache_ref()
    if cache is not None:
        cache._evict(key, token)


class WeakCache(Generic[K, V]):
    """Keyed cache whose values are reclaimed once unreachable elsewhere.

    Parameters
    ----------
    on_evict:
        Called with the key after the collector reclaims a cached value.
        Never called for ``delete``, ``clear``, overwrites, or entries
        already purged by a lookup.  Exceptions it raises are reported
        through *error_handler* and never propagate.
    runtime:
        Weak-reference / finalization primitives.  Defaults to
        :class:`GcRuntime`.
    name:
        Label used for stats, events and log messages.
    event_bus:
        Receives :class:`EntryEvictedEvent` and :class:`EntryDeletedEvent`.
    error_handler:
        Side channel for ``on_evict`` failures.  Defaults to a handler
        logging through this module's logger and publishing to
        *event_bus*.
    stats:
        Optional shared :class:`CacheStatsCollector`.

    ``size`` counts table entries and may include values that were already
    collected but not yet observed; ``live_size`` gives the exact count.
    """

    def __init__(
        self,
        on_evict: EvictCallback | None = None,
        *,
        runtime: ReferenceRuntime | None = None,
        name: str = DEFAULT_CACHE_NAME,
        event_bus: EventBus | None = None,
        error_handler: ErrorHandler | None = None,
        stats: CacheStatsCollector | None = None,
    ) -> None:
        if on_evict is not None and not callable(on_evict):
            raise TypeError("on_evict must be callable")
        self._on_evict = on_evict
        self._runtime: ReferenceRuntime = runtime or GcRuntime()
        self._name = name
        self._events = event_bus
        self._errors = error_handler or ErrorHandler(LOGGER, event_bus)
        self._stats = stats

        self._entries: dict[K, CacheEntry] = {}
        self._tokens = itertools.count(1)
        # Reentrant: a collection triggered while ``set`` holds the lock
        # runs ``_evict`` on the same thread.
        self._lock = threading.RLock()
        self._self_ref = weakref.ref(self)

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> "WeakCache[Any, Any]":
        """Build a cache from an options mapping.

        Recognised keys: ``on_evict`` (or ``onEvict``) and ``name``.  Extra
        keyword arguments are forwarded to the constructor.  Raises
        :class:`OptionsValidationError` for unknown keys or a bad ``name``.
        """
        merged = merge_with_defaults(options)
        kwargs.setdefault("name", merged["name"])
        return cls(merged["on_evict"], **kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: K) -> V | None:
        """Return the cached value, or *None* if missing or collected."""
        with self._lock:
            value = self._lookup(key)
        if self._stats is not None:
            if value is None:
                self._stats.record_miss(self._name)
            else:
                self._stats.record_hit(self._name)
        return value

    def has(self, key: K) -> bool:
        """Return ``True`` if *key* is cached and its value is still alive."""
        with self._lock:
            return self._lookup(key) is not None

    def set(self, key: K, value: V) -> None:
        """Cache *value* under *key*, replacing any previous entry.

        Raises :class:`InvalidValueType` if *value* is ``None`` or cannot be
        weakly referenced.  Bound methods are accepted but die with the
        temporary method object, so cache the function or its owner instead.
        """
        if value is None:
            raise InvalidValueType("Value must support weak references, not None")
        try:
            ref = self._runtime.weak_ref(value)
        except TypeError as exc:
            raise InvalidValueType(
                f"Value must support weak references, not {type(value).__name__!r}"
            ) from exc

        with self._lock:
            previous = self._entries.get(key)
            if previous is not None:
                self._runtime.unwatch(previous.handle)
            token = next(self._tokens)
            handle = self._runtime.watch(value, _collected, self._self_ref, key, token)
            self._entries[key] = CacheEntry(ref=ref, handle=handle, token=token)

        if previous is not None:
            LOGGER.debug("%s: replaced entry for %r", self._name, key)
        else:
            LOGGER.debug("%s: cached %r", self._name, key)

    def delete(self, key: K) -> bool:
        """Remove *key*; return ``True`` if an entry was present.

        The value's finalizer is cancelled, so ``on_evict`` never fires for
        an explicitly deleted key.
        """
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            self._runtime.unwatch(entry.handle)

        LOGGER.debug("%s: deleted %r", self._name, key)
        if self._stats is not None:
            self._stats.record_deletion(self._name)
        if self._events is not None:
            self._events.publish(EntryDeletedEvent(cache_name=self._name, key=key))
        return True

    def clear(self) -> None:
        """Remove every entry without calling ``on_evict``."""
        with self._lock:
            entries = list(self._entries.values())
            self._entries.clear()
            for entry in entries:
                self._runtime.unwatch(entry.handle)
        LOGGER.debug("%s: cleared %d entries", self._name, len(entries))

    @property
    def size(self) -> int:
        """Number of table entries, including collected-but-unobserved ones."""
        with self._lock:
            return len(self._entries)

    @property
    def live_size(self) -> int:
        """Exact number of entries whose value is alive.

        Scans the whole table and purges any dead entry it finds.
        """
        with self._lock:
            return sum(1 for key in list(self._entries) if self._lookup(key) is not None)

    def __len__(self) -> int:
        return self.size

    def __contains__(self, key: object) -> bool:
        return self.has(key)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, size={self.size})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _lookup(self, key: K) -> V | None:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        value = entry.ref()
        if value is None:
            # Collected before the finalizer ran; its callback becomes a
            # no-op once the entry is gone.
            del self._entries[key]
            self._runtime.unwatch(entry.handle)
            LOGGER.debug("%s: purged dead entry %r", self._name, key)
            return None
        return value

    def _evict(self, key: K, token: int) -> None:
        """Finalizer callback: drop *key* if it still holds entry *token*."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.token != token:
                return
            del self._entries[key]

        LOGGER.debug("%s: evicted %r", self._name, key)
        if self._stats is not None:
            self._stats.record_eviction(self._name)
        if self._events is not None:
            self._events.publish(EntryEvictedEvent(cache_name=self._name, key=key))
        if self._on_evict is None:
            return
        try:
            self._on_evict(key)
        except Exception as exc:
            self._errors.handle(
                EvictionCallbackError(key, exc),
                EVICTION_ERROR_SEVERITY,
                context={"cache": self._name, "key": repr(key)},
            )

"""Events emitted by :class:`~weakcache.WeakCache` instances."""

from dataclasses import dataclass
from typing import Any

from .bus import Event


@dataclass(kw_only=True)
class CacheEvent(Event):
    cache_name: str
    key: Any = None


@dataclass(kw_only=True)
class EntryEvictedEvent(CacheEvent):
    """The collector reclaimed the value cached under ``key``."""


@dataclass(kw_only=True)
class EntryDeletedEvent(CacheEvent):
    """``key`` was removed by an explicit ``delete`` call."""

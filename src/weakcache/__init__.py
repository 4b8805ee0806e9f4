"""Weak-valued cache that evicts entries when their values are collected."""

from .errors import EvictionCallbackError, InvalidValueType, OptionsValidationError, WeakCacheError
from .errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from .events import (
    CacheEvent,
    EntryDeletedEvent,
    EntryEvictedEvent,
    Event,
    EventBus,
    Subscription,
)
from .infrastructure.gc_runtime import FinalizationHandle, GcRuntime, ReferenceRuntime
from .infrastructure.services.cache_stats import CacheStats, CacheStatsCollector
from .infrastructure.services.weak_cache import WeakCache

__version__ = "1.0.0"

__all__ = [
    "CacheEvent",
    "CacheStats",
    "CacheStatsCollector",
    "EntryDeletedEvent",
    "EntryEvictedEvent",
    "ErrorHandler",
    "ErrorOccurredEvent",
    "ErrorSeverity",
    "Event",
    "EventBus",
    "EvictionCallbackError",
    "FinalizationHandle",
    "GcRuntime",
    "InvalidValueType",
    "OptionsValidationError",
    "ReferenceRuntime",
    "Subscription",
    "WeakCache",
    "WeakCacheError",
]

from .bus import Event, EventBus, Subscription
from .cache_events import CacheEvent, EntryDeletedEvent, EntryEvictedEvent

__all__ = [
    "CacheEvent",
    "EntryDeletedEvent",
    "EntryEvictedEvent",
    "Event",
    "EventBus",
    "Subscription",
]

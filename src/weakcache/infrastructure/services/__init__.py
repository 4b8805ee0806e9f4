from .cache_stats import CacheStats, CacheStatsCollector
from .weak_cache import CacheEntry, WeakCache

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CacheStatsCollector",
    "WeakCache",
]

"""cachebus

An in-memory cache with pluggable eviction strategies (LRU, FIFO, TTL),
time-based expiry swept in the background, and a synchronous event bus that
reports every hit, miss, insertion, eviction and lifecycle change.
"""

from .cache import (
    MISSING,
    CacheEngine,
    CacheEntry,
    CacheStats,
    EvictionReason,
    EvictionStrategy,
    MissReason,
)
from .event import (
    CACHE_EVENTS,
    WILDCARD,
    EventNotifier,
    Handler,
    Payload,
    RedisEventForwarder,
    Unsubscribe,
)
from .monitoring.metrics import CacheMetricsRecorder
from .utils import (
    AsyncioScheduler,
    CacheConfig,
    Clock,
    ConfigurationError,
    ScheduledTask,
    Scheduler,
    SystemClock,
    ThreadingScheduler,
    default_scheduler,
)

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheStats",
    "CacheConfig",
    "ConfigurationError",
    "EvictionStrategy",
    "EvictionReason",
    "MissReason",
    "MISSING",
    "EventNotifier",
    "RedisEventForwarder",
    "CacheMetricsRecorder",
    "Handler",
    "Payload",
    "Unsubscribe",
    "WILDCARD",
    "CACHE_EVENTS",
    "Clock",
    "SystemClock",
    "Scheduler",
    "ScheduledTask",
    "AsyncioScheduler",
    "ThreadingScheduler",
    "default_scheduler",
]

__version__ = "0.1.0"

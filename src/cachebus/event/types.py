from __future__ import annotations

import typing as t

Payload = t.Dict[str, t.Any]
Handler = t.Callable[[Payload], t.Any]
Unsubscribe = t.Callable[[], None]

WILDCARD = "*"

CACHE_SET = "cache:set"
CACHE_HIT = "cache:hit"
CACHE_MISS = "cache:miss"
CACHE_EVICTION = "cache:eviction"
CACHE_CLEAR = "cache:clear"
CACHE_CLEANUP = "cache:cleanup"
CACHE_STATS_RESET = "cache:statsReset"
CACHE_STRATEGY_CHANGED = "cache:strategyChanged"
CACHE_MAX_SIZE_CHANGED = "cache:maxSizeChanged"
CACHE_SHUTDOWN = "cache:shutdown"

CACHE_EVENTS = (
    CACHE_SET,
    CACHE_HIT,
    CACHE_MISS,
    CACHE_EVICTION,
    CACHE_CLEAR,
    CACHE_CLEANUP,
    CACHE_STATS_RESET,
    CACHE_STRATEGY_CHANGED,
    CACHE_MAX_SIZE_CHANGED,
    CACHE_SHUTDOWN,
)

__all__ = [
    "Payload",
    "Handler",
    "Unsubscribe",
    "WILDCARD",
    "CACHE_EVENTS",
    "CACHE_SET",
    "CACHE_HIT",
    "CACHE_MISS",
    "CACHE_EVICTION",
    "CACHE_CLEAR",
    "CACHE_CLEANUP",
    "CACHE_STATS_RESET",
    "CACHE_STRATEGY_CHANGED",
    "CACHE_MAX_SIZE_CHANGED",
    "CACHE_SHUTDOWN",
]

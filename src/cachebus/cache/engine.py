from __future__ import annotations

import logging
import threading
import typing as t

from cachebus.event import types as ev
from cachebus.event.notifier import EventNotifier
from cachebus.utils.clock import Clock, SystemClock
from cachebus.utils.config import CacheConfig
from cachebus.utils.scheduler import ScheduledTask, Scheduler, default_scheduler

from .eviction import select_victim
from .models import MISSING, CacheEntry, CacheStats, EvictionReason, EvictionStrategy, MissReason

_logger = logging.getLogger(__name__)


class CacheEngine:
    """Bounded key-value cache with TTL expiry and pluggable eviction.

    Every state transition is published on an ``EventNotifier``. Expired
    entries are dropped lazily on access and proactively by a background
    sweep that starts on construction and stops on ``shutdown()``.

    Invalid per-call input (empty key, omitted value, unknown strategy,
    non-positive size) is rejected by returning ``False`` without touching
    state. Only construction raises, with ``ConfigurationError``.
    """

    def __init__(
        self,
        config: t.Optional[CacheConfig] = None,
        *,
        notifier: t.Optional[EventNotifier] = None,
        clock: t.Optional[Clock] = None,
        scheduler: t.Optional[Scheduler] = None,
        **overrides: t.Any,
    ) -> None:
        base = config or CacheConfig()
        self._config = base.replace(**overrides) if overrides else base.validate()

        self._max_size: int = self._config.max_size
        self._strategy: EvictionStrategy = self._config.eviction_strategy
        self._default_ttl: float = self._config.default_ttl

        self._notifier = notifier or EventNotifier()
        self._clock: Clock = clock or SystemClock()

        self._table: t.Dict[str, CacheEntry] = {}
        self._access_order: t.Dict[str, float] = {}
        self._insertion_order: t.Dict[str, float] = {}
        self._stats = CacheStats()

        # guards table, ledgers and stats as one unit against the sweep thread
        self._lock = threading.RLock()
        self._sweeping = False
        self._closed = False

        scheduler = scheduler or default_scheduler()
        self._sweep_task: t.Optional[ScheduledTask] = scheduler.schedule(self._config.sweep_interval, self.sweep)
        _logger.debug(
            "Cache started (max_size=%s, strategy=%s, default_ttl=%s)",
            self._max_size,
            self._strategy.value,
            self._default_ttl,
        )

    @classmethod
    def create(cls, config: t.Optional[CacheConfig] = None, **kwargs: t.Any) -> "CacheEngine":
        return cls(config, **kwargs)

    @property
    def notifier(self) -> EventNotifier:
        return self._notifier

    event_bus = notifier

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def eviction_strategy(self) -> EvictionStrategy:
        return self._strategy

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def closed(self) -> bool:
        return self._closed

    def _publish(self, event: str, **payload: t.Any) -> None:
        payload["event"] = event
        self._notifier.publish(event, payload)

    def _touch(self, key: str, now: float) -> None:
        if self._strategy is EvictionStrategy.RECENCY:
            # re-append so equal stamps still resolve to the least recently touched key
            self._access_order.pop(key, None)
            self._access_order[key] = now

    def _record_insertion(self, key: str, now: float) -> None:
        if self._strategy is EvictionStrategy.INSERTION_ORDER and key not in self._insertion_order:
            self._insertion_order[key] = now

    def _remove(self, key: str, reason: EvictionReason) -> bool:
        entry = self._table.pop(key, None)
        if entry is None:
            return False
        self._access_order.pop(key, None)
        self._insertion_order.pop(key, None)
        self._stats.evictions += 1
        self._stats.current_size = len(self._table)
        _logger.debug("Evicted %s (%s)", key, reason.value)
        self._publish(ev.CACHE_EVICTION, key=key, reason=reason.value, entry=entry)
        return True

    def _evict_one(self) -> bool:
        victim = select_victim(self._strategy, self._table, self._access_order, self._insertion_order)
        if victim is None:
            _logger.warning("No eviction candidate under %s with %d entries", self._strategy.value, len(self._table))
            return False
        key, reason = victim
        if self._strategy is EvictionStrategy.EXPIRY and reason is not EvictionReason.TTL:
            _logger.warning("No entry carries an expiry; evicting oldest entry %s instead", key)
        return self._remove(key, reason)

    @staticmethod
    def _valid_ttl(ttl: t.Any) -> bool:
        return ttl is None or (isinstance(ttl, (int, float)) and not isinstance(ttl, bool))

    def set(self, key: str, value: t.Any = MISSING, ttl: t.Optional[float] = None) -> bool:
        """Store ``value`` under ``key``; ``ttl`` in seconds, ``<= 0`` for no expiry.

        Returns False, storing nothing, for an empty key or an omitted value.
        """
        if not key or not isinstance(key, str) or value is MISSING or not self._valid_ttl(ttl):
            _logger.warning("Rejected set for key %r", key)
            return False

        with self._lock:
            if key not in self._table and len(self._table) >= self._max_size:
                self._evict_one()

            now = self._clock.now()
            effective_ttl = self._default_ttl if ttl is None else ttl
            expires_at = now + effective_ttl if effective_ttl > 0 else None
            self._table[key] = CacheEntry(value=value, inserted_at=now, expires_at=expires_at)
            self._touch(key, now)
            self._record_insertion(key, now)

            self._stats.insertions += 1
            self._stats.current_size = len(self._table)
            self._publish(ev.CACHE_SET, key=key, value=value, ttl=effective_ttl, expires_at=expires_at)
            return True

    def get(self, key: str, default: t.Any = None) -> t.Any:
        with self._lock:
            entry = self._table.get(key)
            if entry is None:
                self._stats.misses += 1
                self._publish(ev.CACHE_MISS, key=key, reason=MissReason.ABSENT.value)
                return default

            now = self._clock.now()
            if entry.is_expired(now):
                self._remove(key, EvictionReason.EXPIRED)
                self._stats.misses += 1
                self._publish(ev.CACHE_MISS, key=key, reason=MissReason.EXPIRED.value)
                return default

            self._touch(key, now)
            self._stats.hits += 1
            self._publish(ev.CACHE_HIT, key=key, value=entry.value)
            return entry.value

    def has(self, key: str) -> bool:
        """Existence check; drops the entry if it has expired but never counts as an access."""
        with self._lock:
            entry = self._table.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock.now()):
                self._remove(key, EvictionReason.EXPIRED)
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._remove(key, EvictionReason.MANUAL)

    def clear(self) -> None:
        with self._lock:
            previous_size = len(self._table)
            for key in list(self._table):
                self._remove(key, EvictionReason.CLEAR)
            self._publish(ev.CACHE_CLEAR, previous_size=previous_size)

    def keys(self) -> t.List[str]:
        with self._lock:
            return list(self._table)

    def size(self) -> int:
        return len(self._table)

    def get_stats(self) -> t.Dict[str, t.Any]:
        with self._lock:
            self._stats.current_size = len(self._table)
            stats = self._stats.to_dict()
            stats["max_size"] = self._max_size
            stats["eviction_strategy"] = self._strategy.value
            return stats

    def reset_stats(self) -> None:
        with self._lock:
            self._stats.reset()
            self._stats.current_size = len(self._table)
            self._publish(ev.CACHE_STATS_RESET)

    def set_eviction_strategy(self, strategy: t.Any) -> bool:
        """Switch eviction strategy; returns False for an unknown name.

        Switching rebuilds the new strategy's ledger from the keys present,
        all stamped with the current time, so ties resolve in table order.
        Naming the strategy already in use keeps the existing ledger as is.
        ``cache:strategyChanged`` is published either way.
        """
        parsed = EvictionStrategy.parse(strategy)
        if parsed is None:
            _logger.warning("Ignoring unknown eviction strategy %r", strategy)
            return False

        with self._lock:
            previous = self._strategy
            if parsed is not previous:
                self._strategy = parsed
                self._access_order.clear()
                self._insertion_order.clear()
                # every key gets the same stamp, so ties resolve in table order
                now = self._clock.now()
                if parsed is EvictionStrategy.RECENCY:
                    self._access_order = dict.fromkeys(self._table, now)
                elif parsed is EvictionStrategy.INSERTION_ORDER:
                    self._insertion_order = dict.fromkeys(self._table, now)
                _logger.debug("Eviction strategy %s -> %s", previous.value, parsed.value)
            self._publish(ev.CACHE_STRATEGY_CHANGED, strategy=parsed.value, previous=previous.value)
            return True

    def set_max_size(self, new_max: int) -> bool:
        if isinstance(new_max, bool) or not isinstance(new_max, int) or new_max <= 0:
            _logger.warning("Ignoring invalid max_size %r", new_max)
            return False

        with self._lock:
            previous = self._max_size
            self._max_size = new_max
            while len(self._table) > self._max_size:
                if not self._evict_one():
                    break
            self._publish(ev.CACHE_MAX_SIZE_CHANGED, max_size=new_max, previous=previous)
            return True

    def sweep(self) -> int:
        """Remove every expired entry; returns how many were removed.

        Runs on the background schedule. A sweep that finds another one already
        in progress, or a cache that has been shut down, does nothing.
        """
        with self._lock:
            if self._closed or self._sweeping:
                return 0
            self._sweeping = True
            try:
                now = self._clock.now()
                expired = [key for key, entry in self._table.items() if entry.is_expired(now)]
                removed = sum(1 for key in expired if self._remove(key, EvictionReason.EXPIRED))
                if removed:
                    _logger.debug("Sweep removed %d expired entries", removed)
                    self._publish(ev.CACHE_CLEANUP, count=removed)
                return removed
            finally:
                self._sweeping = False

    def shutdown(self) -> None:
        """Stop the sweep, announce final stats, then drop every subscription. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._sweep_task is not None:
                self._sweep_task.cancel()
                self._sweep_task = None
            self._publish(ev.CACHE_SHUTDOWN, stats=self.get_stats())
            self._notifier.clear()
            _logger.debug("Cache shut down")

    def debug_info(self) -> t.Dict[str, t.Any]:
        with self._lock:
            return {
                "cache_size": len(self._table),
                "access_order_size": len(self._access_order),
                "insertion_order_size": len(self._insertion_order),
                "eviction_strategy": self._strategy.value,
                "max_size": self._max_size,
                "default_ttl": self._default_ttl,
                "closed": self._closed,
            }

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __enter__(self) -> "CacheEngine":
        return self

    def __exit__(self, *exc_info: t.Any) -> None:
        self.shutdown()

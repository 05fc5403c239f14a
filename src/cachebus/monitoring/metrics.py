from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from cachebus.event import types as ev
from cachebus.event.notifier import EventNotifier


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            self.counts[key] = [0 for _ in self.buckets]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break


class CacheMetricsRecorder:
    """Observer that turns cache events into counters.

    ``cache_events_total`` is labelled by event name and, for misses and
    evictions, by reason. ``cache_cleanup_removed`` records the size of every
    sweep that removed something.
    """

    def __init__(self, notifier: t.Optional[EventNotifier] = None) -> None:
        self.events_total = Counter("cache_events_total", "Cache events by name and reason")
        self.cleanup_removed = Histogram(
            "cache_cleanup_removed",
            "Entries removed per background sweep",
            buckets=[1, 5, 10, 50, 100, 500, float("inf")],
        )
        self._unsubscribe: t.Optional[ev.Unsubscribe] = None
        if notifier is not None:
            self.attach(notifier)

    def attach(self, notifier: EventNotifier) -> "CacheMetricsRecorder":
        self.detach()
        self._unsubscribe = notifier.subscribe(ev.WILDCARD, self.record)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def record(self, payload: ev.Payload) -> None:
        event = payload.get("event", "unknown")
        reason = payload.get("reason")
        if reason is not None:
            self.events_total.inc(event=event, reason=str(reason))
        else:
            self.events_total.inc(event=event)
        if event == ev.CACHE_CLEANUP:
            self.cleanup_removed.observe(float(payload.get("count", 0)))

    def count(self, event: str, reason: t.Optional[str] = None) -> float:
        if reason is None:
            return self.events_total.get(event=event)
        return self.events_total.get(event=event, reason=reason)

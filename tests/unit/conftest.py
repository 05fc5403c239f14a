"""Shared fixtures and fakes for unit tests."""

from __future__ import annotations

import typing as t

import pytest

from cachebus.cache.engine import CacheEngine
from cachebus.event.notifier import EventNotifier


class FakeClock:
    """Clock whose time only moves when the test says so."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class ManualTask:
    def __init__(self, interval: float, callback: t.Callable[[], t.Any]) -> None:
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler that never fires on its own; ``tick()`` runs due callbacks synchronously."""

    def __init__(self) -> None:
        self.tasks: t.List[ManualTask] = []

    def schedule(self, interval: float, callback: t.Callable[[], t.Any]) -> ManualTask:
        task = ManualTask(interval, callback)
        self.tasks.append(task)
        return task

    def tick(self) -> t.List[t.Any]:
        return [task.callback() for task in self.tasks if not task.cancelled]

    @property
    def active(self) -> t.List[ManualTask]:
        return [task for task in self.tasks if not task.cancelled]


class EventLog:
    """Wildcard subscriber that remembers every payload it sees."""

    def __init__(self, notifier: EventNotifier) -> None:
        self.payloads: t.List[t.Dict[str, t.Any]] = []
        notifier.subscribe("*", self.payloads.append)

    def named(self, event: str) -> t.List[t.Dict[str, t.Any]]:
        return [p for p in self.payloads if p["event"] == event]

    def names(self) -> t.List[str]:
        return [p["event"] for p in self.payloads]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return EventNotifier()


@pytest.fixture
def events(notifier):
    return EventLog(notifier)


@pytest.fixture
def make_cache(clock, scheduler, notifier):
    """Factory for engines wired to the fake clock, manual scheduler and shared notifier."""
    created: t.List[CacheEngine] = []

    def _make(**kwargs: t.Any) -> CacheEngine:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("notifier", notifier)
        engine = CacheEngine(**kwargs)
        created.append(engine)
        return engine

    yield _make
    for engine in created:
        engine.shutdown()


@pytest.fixture
def cache(make_cache):
    return make_cache(max_size=3, default_ttl=60)

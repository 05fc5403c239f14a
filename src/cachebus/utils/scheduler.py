from __future__ import annotations

import asyncio
import logging
import threading
import typing as t

_logger = logging.getLogger(__name__)

Callback = t.Callable[[], t.Any]


@t.runtime_checkable
class ScheduledTask(t.Protocol):
    @property
    def cancelled(self) -> bool:  # pragma: no cover - interface
        ...

    def cancel(self) -> None:  # pragma: no cover - interface
        ...


@t.runtime_checkable
class Scheduler(t.Protocol):
    def schedule(self, interval: float, callback: Callback) -> ScheduledTask:  # pragma: no cover - interface
        ...


def _run_safely(callback: Callback) -> None:
    try:
        callback()
    except Exception:
        _logger.exception("Scheduled callback %r failed", callback)


class _AsyncioTask:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callback) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._handle: t.Optional[asyncio.TimerHandle] = None
        self._cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._handle = self._loop.call_later(self._interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        _run_safely(self._callback)
        if not self._cancelled:
            self._arm()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioScheduler:
    """Runs callbacks on an event loop via ``call_later``.

    Callbacks execute on the loop thread between other tasks, so they never
    interleave with synchronous code running on that loop.
    """

    def __init__(self, loop: t.Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule(self, interval: float, callback: Callback) -> _AsyncioTask:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTask(loop, interval, callback)


class _ThreadTask:
    def __init__(self, interval: float, callback: Callback, name: str) -> None:
        self._interval = interval
        self._callback = callback
        self._name = name
        self._stopped = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            _run_safely(self._callback)

    @property
    def cancelled(self) -> bool:
        return self._stopped.is_set()

    def cancel(self) -> None:
        self._stopped.set()


class ThreadingScheduler:
    """Runs each callback on its own daemon thread at a fixed interval."""

    def __init__(self, thread_name: str = "cachebus-sweep") -> None:
        self._thread_name = thread_name

    def schedule(self, interval: float, callback: Callback) -> _ThreadTask:
        return _ThreadTask(interval, callback, self._thread_name)


def default_scheduler() -> Scheduler:
    """AsyncioScheduler inside a running event loop, ThreadingScheduler otherwise."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return ThreadingScheduler()
    return AsyncioScheduler(loop)

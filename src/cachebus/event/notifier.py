from __future__ import annotations

import logging
import threading
import typing as t

from .types import WILDCARD, Handler, Payload, Unsubscribe

_logger = logging.getLogger(__name__)


class EventNotifier:
    """Synchronous in-process publish/subscribe hub.

    Handlers are kept per event name in registration order. ``publish`` calls
    every handler registered at the moment of the call, in the caller's thread;
    a handler that raises is logged and the remaining handlers still run.

    Handlers registered under ``"*"`` receive every published event, with the
    event name added to the payload under ``"event"``.
    """

    def __init__(self) -> None:
        self._handlers: t.Dict[str, t.Dict[Handler, None]] = {}
        # (event, original handler) -> wrapper installed by subscribe_once
        self._once: t.Dict[t.Tuple[str, Handler], Handler] = {}
        self._lock = threading.Lock()

    def subscribe(self, event: str, handler: Handler) -> Unsubscribe:
        if not callable(handler):
            raise TypeError("handler must be callable")
        with self._lock:
            self._handlers.setdefault(event, {})[handler] = None
        return lambda: self._discard(event, handler)

    def subscribe_once(self, event: str, handler: Handler) -> Unsubscribe:
        """Register ``handler`` for the next ``event`` only.

        A handler already waiting for one ``event`` keeps its registration; the
        returned token only cancels the one-shot registration, never a plain
        ``subscribe`` of the same handler.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")

        def _once(payload: Payload) -> t.Any:
            self._drop_once(event, handler, _once)
            return handler(payload)

        with self._lock:
            wrapper = self._once.setdefault((event, handler), _once)
            self._handlers.setdefault(event, {})[wrapper] = None
        return lambda: self._drop_once(event, handler, wrapper)

    def _drop_once(self, event: str, handler: Handler, wrapper: Handler) -> None:
        with self._lock:
            if self._once.get((event, handler)) is wrapper:
                del self._once[(event, handler)]
        self._discard(event, wrapper)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        with self._lock:
            wrapper = self._once.pop((event, handler), None)
        if wrapper is not None:
            self._discard(event, wrapper)
        self._discard(event, handler)

    def _discard(self, event: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers.get(event)
            if handlers is None:
                return
            handlers.pop(handler, None)
            if not handlers:
                del self._handlers[event]

    def publish(self, event: str, payload: t.Any = None) -> int:
        """Deliver ``payload`` to the handlers of ``event``; returns how many were called."""
        with self._lock:
            direct = list(self._handlers.get(event, ()))
            wildcard = list(self._handlers.get(WILDCARD, ())) if event != WILDCARD else []

        for handler in direct:
            self._invoke(event, handler, payload)
        if wildcard:
            tagged = self._tag(event, payload)
            for handler in wildcard:
                self._invoke(event, handler, tagged)
        return len(direct) + len(wildcard)

    @staticmethod
    def _tag(event: str, payload: t.Any) -> Payload:
        if payload is None:
            return {"event": event}
        if isinstance(payload, dict):
            if payload.get("event") == event:
                return payload
            return {**payload, "event": event}
        return {"event": event, "data": payload}

    @staticmethod
    def _invoke(event: str, handler: Handler, payload: t.Any) -> None:
        try:
            handler(payload)
        except Exception:
            _logger.exception("Handler %r failed for event %s", handler, event)

    def clear(self, event: t.Optional[str] = None) -> None:
        with self._lock:
            if event is None:
                self._handlers.clear()
                self._once.clear()
                return
            self._handlers.pop(event, None)
            for key in [k for k in self._once if k[0] == event]:
                del self._once[key]

    def listener_count(self, event: t.Optional[str] = None) -> int:
        with self._lock:
            if event is None:
                return sum(len(handlers) for handlers in self._handlers.values())
            return len(self._handlers.get(event, ()))

    def events(self) -> t.List[str]:
        with self._lock:
            return list(self._handlers)

from __future__ import annotations

import dataclasses
import enum
import json
import logging
import typing as t

from redis import Redis
from redis.exceptions import RedisError

from .notifier import EventNotifier
from .types import WILDCARD, Payload, Unsubscribe

_logger = logging.getLogger(__name__)


def _encode_default(obj: t.Any) -> t.Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, enum.Enum):
        return obj.value
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    return repr(obj)


class RedisEventForwarder:
    """Mirrors every notifier event onto a Redis pub/sub channel as JSON.

    Messages look like ``{"event": "cache:set", "key": ..., ...}``; values that
    are not JSON serialisable are rendered with ``repr``. Publish failures are
    logged and counted, never raised back into the notifier.
    """

    def __init__(
        self,
        client: t.Optional[t.Any] = None,
        *,
        url: str = "redis://localhost:6379/0",
        channel: str = "cachebus:events",
    ) -> None:
        self._client = client if client is not None else Redis.from_url(url)
        self._channel = channel
        self._unsubscribe: t.Optional[Unsubscribe] = None
        self.published = 0
        self.failures = 0

    @property
    def channel(self) -> str:
        return self._channel

    def attach(self, notifier: EventNotifier) -> "RedisEventForwarder":
        self.detach()
        self._unsubscribe = notifier.subscribe(WILDCARD, self)
        return self

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    @staticmethod
    def encode(payload: Payload) -> str:
        return json.dumps(payload, default=_encode_default)

    def __call__(self, payload: Payload) -> None:
        try:
            message = self.encode(payload)
        except (TypeError, ValueError):
            self.failures += 1
            _logger.exception("Could not encode %s for %s", payload.get("event"), self._channel)
            return
        try:
            self._client.publish(self._channel, message)
        except (RedisError, OSError):
            self.failures += 1
            _logger.exception("Failed to forward %s to %s", payload.get("event"), self._channel)
            return
        self.published += 1

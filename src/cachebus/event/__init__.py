from .notifier import EventNotifier
from .redis import RedisEventForwarder
from .types import CACHE_EVENTS, WILDCARD, Handler, Payload, Unsubscribe

__all__ = [
    "EventNotifier",
    "RedisEventForwarder",
    "Handler",
    "Payload",
    "Unsubscribe",
    "WILDCARD",
    "CACHE_EVENTS",
]

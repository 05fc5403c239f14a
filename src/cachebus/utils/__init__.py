"""Clock, scheduling and configuration collaborators for the cache engine."""

from .clock import Clock, SystemClock
from .config import CacheConfig, ConfigurationError
from .scheduler import AsyncioScheduler, ScheduledTask, Scheduler, ThreadingScheduler, default_scheduler

__all__ = [
    "Clock",
    "SystemClock",
    "CacheConfig",
    "ConfigurationError",
    "Scheduler",
    "ScheduledTask",
    "AsyncioScheduler",
    "ThreadingScheduler",
    "default_scheduler",
]

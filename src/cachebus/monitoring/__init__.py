"""Observers that derive metrics from cache events."""

from .metrics import CacheMetricsRecorder, Counter, Histogram

__all__ = ["CacheMetricsRecorder", "Counter", "Histogram"]

from .models import MISSING, CacheEntry, CacheStats, EvictionReason, EvictionStrategy, MissReason
from .engine import CacheEngine

__all__ = [
    "CacheEngine",
    "CacheEntry",
    "CacheStats",
    "EvictionReason",
    "EvictionStrategy",
    "MissReason",
    "MISSING",
]

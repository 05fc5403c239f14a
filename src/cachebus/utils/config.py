from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict

from cachebus.cache.models import EvictionStrategy


class ConfigurationError(ValueError):
    """Raised when a cache is built from an invalid configuration."""


@dataclass
class CacheConfig:
    max_size: int = 100
    eviction_strategy: EvictionStrategy = EvictionStrategy.RECENCY
    default_ttl: float = 60.0  # seconds; 0 disables expiry
    sweep_interval: float = 30.0

    def __post_init__(self) -> None:
        parsed = EvictionStrategy.parse(self.eviction_strategy)
        if parsed is not None:
            self.eviction_strategy = parsed

    def validate(self) -> "CacheConfig":
        if isinstance(self.max_size, bool) or not isinstance(self.max_size, int) or self.max_size <= 0:
            raise ConfigurationError(f"max_size must be a positive integer, got {self.max_size!r}")
        if not isinstance(self.eviction_strategy, EvictionStrategy):
            raise ConfigurationError(f"unknown eviction strategy {self.eviction_strategy!r}")
        if not isinstance(self.default_ttl, (int, float)) or self.default_ttl < 0:
            raise ConfigurationError(f"default_ttl must be a non-negative number, got {self.default_ttl!r}")
        if not isinstance(self.sweep_interval, (int, float)) or self.sweep_interval <= 0:
            raise ConfigurationError(f"sweep_interval must be positive, got {self.sweep_interval!r}")
        return self

    def replace(self, **changes: Any) -> "CacheConfig":
        try:
            return dataclasses.replace(self, **changes).validate()
        except TypeError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"unknown cache options: {', '.join(unknown)}")
        return cls(**data).validate()

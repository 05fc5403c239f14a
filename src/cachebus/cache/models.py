from __future__ import annotations

import enum
import typing as t
from dataclasses import asdict, dataclass


class _Missing:
    """Sentinel for a value that was never supplied."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: t.Any = _Missing()


class EvictionStrategy(str, enum.Enum):
    RECENCY = "LRU"
    INSERTION_ORDER = "FIFO"
    EXPIRY = "TTL"

    @classmethod
    def parse(cls, value: t.Any) -> t.Optional["EvictionStrategy"]:
        """Resolve a strategy from a member, its value ("LRU") or its name ("RECENCY").

        Returns None for anything unrecognised.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().upper()
        for member in cls:
            if normalized in (member.value, member.name):
                return member
        if normalized == "FIRST_IN_FIRST_OUT":
            return cls.INSERTION_ORDER
        return None


class EvictionReason(str, enum.Enum):
    EXPIRED = "expired"
    MANUAL = "manual"
    CLEAR = "clear"
    LRU = "LRU"
    FIFO = "FIFO"
    TTL = "TTL"

    @classmethod
    def for_strategy(cls, strategy: EvictionStrategy) -> "EvictionReason":
        return cls(strategy.value)


class MissReason(str, enum.Enum):
    ABSENT = "absent"
    EXPIRED = "expired"


@dataclass
class CacheEntry:
    value: t.Any
    inserted_at: float
    expires_at: t.Optional[float] = None

    def __post_init__(self) -> None:
        if self.expires_at is not None and self.expires_at < self.inserted_at:
            raise ValueError("expires_at must not precede inserted_at")

    def is_expired(self, now: float) -> bool:
        # an entry is gone at the instant its ttl runs out
        return self.expires_at is not None and now >= self.expires_at


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    insertions: int = 0
    current_size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.insertions = 0

    def to_dict(self) -> t.Dict[str, t.Any]:
        data = asdict(self)
        data["hit_rate"] = self.hit_rate
        return data

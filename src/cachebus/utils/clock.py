from __future__ import annotations

import time
import typing as t


@t.runtime_checkable
class Clock(t.Protocol):
    def now(self) -> float:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall-clock seconds from ``time.time()``."""

    def now(self) -> float:
        return time.time()

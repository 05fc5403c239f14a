"""Victim selection for each eviction strategy.

Each selector scans its ledger once and returns the first key holding the
smallest stamp, so ties resolve to the earliest ledger position.
"""

from __future__ import annotations

import typing as t

from .models import CacheEntry, EvictionReason, EvictionStrategy

Victim = t.Tuple[str, EvictionReason]


def _oldest(stamps: t.Iterable[t.Tuple[str, float]]) -> t.Optional[str]:
    victim: t.Optional[str] = None
    oldest = float("inf")
    for key, stamp in stamps:
        if stamp < oldest:
            oldest = stamp
            victim = key
    return victim


def select_least_recent(access_order: t.Mapping[str, float]) -> t.Optional[str]:
    return _oldest(access_order.items())


def select_first_inserted(insertion_order: t.Mapping[str, float]) -> t.Optional[str]:
    return _oldest(insertion_order.items())


def select_soonest_expiring(table: t.Mapping[str, CacheEntry]) -> t.Optional[str]:
    return _oldest((key, entry.expires_at) for key, entry in table.items() if entry.expires_at is not None)


def select_oldest_entry(table: t.Mapping[str, CacheEntry]) -> t.Optional[str]:
    return _oldest((key, entry.inserted_at) for key, entry in table.items())


def select_victim(
    strategy: EvictionStrategy,
    table: t.Mapping[str, CacheEntry],
    access_order: t.Mapping[str, float],
    insertion_order: t.Mapping[str, float],
) -> t.Optional[Victim]:
    """Pick exactly one key to evict under ``strategy``, or None when the table is empty.

    Under EXPIRY, entries without an expiry are never chosen by the expiry rule;
    if none of them expire, the oldest inserted entry is chosen instead and the
    reason is reported as FIFO.
    """
    if not table:
        return None
    if strategy is EvictionStrategy.RECENCY:
        key = select_least_recent(access_order)
    elif strategy is EvictionStrategy.INSERTION_ORDER:
        key = select_first_inserted(insertion_order)
    else:
        key = select_soonest_expiring(table)
        if key is None:
            fallback = select_oldest_entry(table)
            return (fallback, EvictionReason.FIFO) if fallback is not None else None
    if key is None:
        return None
    return key, EvictionReason.for_strategy(strategy)

#!/usr/bin/env python3
"""Walk through the cache lifecycle while printing every event it emits.

    python examples/cache_demo.py --max-size 5 --ttl 10
    python examples/cache_demo.py --redis-url redis://localhost:6379/0
"""

import logging
import time
from typing import Optional

import click

from cachebus import CacheEngine, CacheMetricsRecorder, EventNotifier, EvictionStrategy, RedisEventForwarder
from cachebus.event import types as ev


def _now() -> str:
    return time.strftime("%H:%M:%S")


def attach_printers(notifier: EventNotifier) -> None:
    notifier.subscribe(ev.CACHE_HIT, lambda p: print(f"[{_now()}] HIT      {p['key']}"))
    notifier.subscribe(
        ev.CACHE_MISS,
        lambda p: print(f"[{_now()}] MISS     {p['key']} ({p['reason']})"),
    )
    notifier.subscribe(
        ev.CACHE_EVICTION,
        lambda p: print(f"[{_now()}] EVICTED  {p['key']} ({p['reason']})"),
    )
    notifier.subscribe(
        ev.CACHE_SET,
        lambda p: print(f"[{_now()}] SET      {p['key']} (ttl={p['ttl']}s)"),
    )
    notifier.subscribe(ev.CACHE_CLEANUP, lambda p: print(f"[{_now()}] CLEANUP  {p['count']} expired"))


@click.command()
@click.option("--max-size", default=5, type=int, help="Maximum number of entries")
@click.option(
    "--strategy",
    default=EvictionStrategy.RECENCY.value,
    type=click.Choice([s.value for s in EvictionStrategy]),
    help="Initial eviction strategy",
)
@click.option("--ttl", default=10.0, type=float, help="Default TTL in seconds")
@click.option("--short-ttl", default=2.0, type=float, help="TTL of the entry that is left to expire")
@click.option("--redis-url", default=None, help="Also forward events to Redis pub/sub at this URL")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(
    max_size: int,
    strategy: str,
    ttl: float,
    short_ttl: float,
    redis_url: Optional[str],
    verbose: bool,
) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    notifier = EventNotifier()
    attach_printers(notifier)
    recorder = CacheMetricsRecorder(notifier)
    if redis_url:
        RedisEventForwarder(url=redis_url).attach(notifier)

    with CacheEngine(max_size=max_size, eviction_strategy=strategy, default_ttl=ttl, notifier=notifier) as cache:
        cache.set("user:1", {"id": 1, "name": "Alice"}, ttl=short_ttl)
        cache.set("user:2", {"id": 2, "name": "Bob"})
        cache.set("product:1", {"id": 1, "name": "Laptop", "price": 999})
        cache.set("config:theme", "dark")
        cache.set("config:language", "es")

        print("\n--- forcing an eviction ---")
        cache.set("config:fontSize", "large")

        print("\n--- lookups ---")
        print(f"user:2 -> {cache.get('user:2')}")
        print(f"user:999 -> {cache.get('user:999')}")

        print("\n--- switching to FIFO ---")
        cache.set_eviction_strategy(EvictionStrategy.INSERTION_ORDER)
        print(cache.get_stats())

        print(f"\n--- waiting {short_ttl}s for user:1 to expire ---")
        time.sleep(short_ttl)
        print(f"user:1 -> {cache.get('user:1')}")

        print("\n--- final stats ---")
        print(cache.get_stats())
        for labels, value in sorted(recorder.events_total.values.items()):
            print(f"  {dict(labels)}: {int(value)}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Tail cache events forwarded to Redis by RedisEventForwarder."""

import json
import time
from typing import Any, Dict, Optional, Tuple

import click
from redis import Redis


def _now() -> str:
    return time.strftime("%H:%M:%S")


def parse_event(raw: str) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except ValueError:
        return {"event": "?", "raw": raw}
    if not isinstance(payload, dict):
        return {"event": "?", "raw": raw}
    return payload


def format_event(payload: Dict[str, Any]) -> str:
    payload = dict(payload)
    event = payload.pop("event", "?")
    details = "  ".join(f"{k}={v}" for k, v in sorted(payload.items()) if k != "entry")
    return f"{event:<22} {details}"


def monitor(url: str, channel: str, only: Tuple[str, ...], limit: Optional[int]) -> None:
    client = Redis.from_url(url, decode_responses=True)
    pubsub = client.pubsub(ignore_subscribe_messages=True)
    pubsub.subscribe(channel)
    print(f"[{_now()}] listening on '{channel}' ({url})")
    seen = 0
    try:
        for message in pubsub.listen():
            data = message.get("data")
            if not isinstance(data, str):
                continue
            payload = parse_event(data)
            if only and payload.get("event") not in only:
                continue
            print(f"[{_now()}] {format_event(payload)}")
            seen += 1
            if limit is not None and seen >= limit:
                break
    except KeyboardInterrupt:
        pass
    finally:
        pubsub.close()


@click.command()
@click.option("--url", default="redis://localhost:6379/0", help="Redis URL")
@click.option("--channel", default="cachebus:events", help="Channel the forwarder publishes on")
@click.option("--only", multiple=True, help="Only show these event names (repeatable)")
@click.option("--limit", default=None, type=int, help="Stop after N events")
def main(url: str, channel: str, only: Tuple[str, ...], limit: Optional[int]) -> None:
    monitor(url, channel, only, limit)


if __name__ == "__main__":
    main()

"""Redis-backed JSON cache for upstream payloads.

Redis is optional: with no URL configured, or with the server unreachable,
reads miss and writes are dropped.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import redis

from road_import.config import settings

log = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None
_resolved = False


def _connect(url: str) -> Optional[redis.Redis]:
    if not url:
        return None
    try:
        client = redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=3)
        client.ping()
    except (redis.RedisError, ValueError) as exc:
        log.warning("Redis at %s unusable (%s); Overpass responses will not be cached", url, exc)
        return None
    log.info("Overpass cache backed by %s", url)
    return client


def get_redis() -> Optional[redis.Redis]:
    """Connect once per process; ``None`` means caching is off."""
    global _client, _resolved
    if not _resolved:
        _resolved = True
        _client = _connect(settings.redis_url)
    return _client


def cache_get_json(key: str) -> Optional[Any]:
    r = get_redis()
    if r is None:
        return None
    try:
        raw = r.get(key)
        return None if raw is None else json.loads(raw)
    except (redis.RedisError, ValueError) as exc:
        log.debug("Cache miss on %s after error: %s", key, exc)
        return None


def cache_set_json(key: str, value: Any, ttl: int) -> None:
    r = get_redis()
    if r is None:
        return
    try:
        r.set(key, json.dumps(value), ex=ttl)
    except redis.RedisError as exc:
        log.debug("Dropped cache write for %s: %s", key, exc)

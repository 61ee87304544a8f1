"""Process-wide Redis client."""

from __future__ import annotations

import redis

from .config import get_settings

_redis: redis.Redis | None = None


def get_redis() -> redis.Redis:
    global _redis
    if _redis is None:
        _redis = redis.Redis.from_url(
            get_settings().redis_url,
            decode_responses=True,  # str instead of bytes
        )
    return _redis


def close_redis() -> None:
    global _redis
    if _redis is not None:
        _redis.close()
        _redis = None

"""Redis cache for the trending search terms list.

Redis is optional. When it is not configured or unreachable, callers check
`is_ready()` and go straight to PostgreSQL.

Only the trending terms list is cached (TRENDING_CACHE_TTL, default 60s).
Search results, store visibility and promotion prices are never cached:
blocking a store or an expiring promotion shows up on the very next query.
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from preco_facil.settings import get_settings

KEY_TRENDING_TERMS = "trending:terms:{limit}"

_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Connect and ping; the client is only kept once the ping succeeds."""
    global _redis
    client = redis.from_url(
        get_settings().redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    try:
        await client.ping()
    except Exception:
        await client.aclose()
        raise
    _redis = client
    logger.info("[startup] Redis connected")


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


def is_ready() -> bool:
    """Whether a Redis connection is available."""
    return _redis is not None


def _get_redis() -> redis.Redis:
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


async def cache_get_json(key: str) -> Any | None:
    """Decoded JSON value at `key`, or None when missing."""
    raw = await _get_redis().get(key)
    return json.loads(raw) if raw else None


async def cache_set_json(key: str, value: Any, ttl: int) -> None:
    await _get_redis().setex(key, ttl, json.dumps(value))


async def get_trending_terms_cache(limit: int) -> list[dict[str, Any]] | None:
    return await cache_get_json(KEY_TRENDING_TERMS.format(limit=limit))


async def set_trending_terms_cache(limit: int, payload: list[dict[str, Any]], ttl: int) -> None:
    await cache_set_json(KEY_TRENDING_TERMS.format(limit=limit), payload, ttl)

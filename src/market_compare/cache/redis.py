"""Redis client and connection pool management.

A single async connection pool backs the comparison result cache. It is opened
and closed by the application lifespan; everything else reaches it through
``get_cache_client``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from market_compare.core.config import get_settings
from market_compare.observability.logging import get_logger


if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

_cache_pool: ConnectionPool[Any] | None = None
_cache_client: Redis[Any] | None = None


async def init_redis_pool() -> Redis[Any]:
    """Open the cache connection pool and verify it with a ping.

    Raises:
        redis.ConnectionError: If Redis cannot be reached.
    """
    global _cache_pool, _cache_client  # noqa: PLW0603

    settings = get_settings()

    logger.info(
        "Initializing Redis connection",
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.cache_db,
    )

    # Payloads are orjson bytes, so responses stay undecoded
    _cache_pool = ConnectionPool.from_url(
        settings.redis_cache_url,
        max_connections=settings.redis.max_connections,
        decode_responses=False,
    )
    _cache_client = redis.Redis(connection_pool=_cache_pool)

    try:
        await _cache_client.ping()
    except redis.ConnectionError:
        logger.exception("Failed to connect to Redis")
        await close_redis_pool()
        raise

    logger.info("Redis connection established")
    return _cache_client


async def close_redis_pool() -> None:
    """Close the cache client and its pool, if open."""
    global _cache_pool, _cache_client  # noqa: PLW0603

    if _cache_client is not None:
        await _cache_client.aclose()
        _cache_client = None

    if _cache_pool is not None:
        await _cache_pool.disconnect()
        _cache_pool = None

    logger.info("Redis connection closed")


def get_cache_client() -> Redis[Any]:
    """Get the cache Redis client.

    Raises:
        RuntimeError: If Redis is not initialized.
    """
    if _cache_client is None:
        msg = "Redis cache client not initialized. Call init_redis_pool() first."
        raise RuntimeError(msg)
    return _cache_client


async def check_redis_health() -> dict[str, str]:
    """Report the cache connection status for readiness probes."""
    if _cache_client is None:
        return {"redis_cache": "not_initialized"}

    try:
        await _cache_client.ping()
    except redis.ConnectionError:
        return {"redis_cache": "unhealthy"}
    return {"redis_cache": "healthy"}

"""Redis cache connection management."""

from market_compare.cache.redis import (
    check_redis_health,
    close_redis_pool,
    get_cache_client,
    init_redis_pool,
)


__all__ = [
    "check_redis_health",
    "close_redis_pool",
    "get_cache_client",
    "init_redis_pool",
]

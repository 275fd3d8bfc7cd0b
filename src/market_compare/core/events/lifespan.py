"""Application lifespan event handlers.

Startup configures logging, opens the Redis cache (optional) and builds the
comparison service. Shutdown releases them in reverse order.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from market_compare.cache.redis import close_redis_pool, init_redis_pool
from market_compare.core.config import Settings, get_settings
from market_compare.observability.logging import get_logger, setup_logging
from market_compare.services.comparison.service import ComparisonService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI
    from redis.asyncio import Redis

logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup."""
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )

    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    cache_client = await _init_cache(settings)
    await _init_comparison_service(app, settings, cache_client)

    logger.info("Application startup complete")


async def _init_cache(settings: Settings) -> Redis[Any] | None:
    """Open the Redis cache; the service runs without it on failure."""
    if not settings.comparison.cache_enabled:
        logger.info("Comparison cache disabled by configuration")
        return None

    try:
        return await init_redis_pool()
    except Exception:
        logger.exception("Failed to initialize Redis - continuing without cache")
        return None


async def _init_comparison_service(
    app: FastAPI,
    settings: Settings,
    cache_client: Redis[Any] | None,
) -> None:
    """Build the comparison service and store it in app state."""
    service = ComparisonService(
        cache_client=cache_client,
        settings=settings.comparison,
    )
    await service.initialize()
    app.state.comparison_service = service


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services."""
    logger.info("Shutting down application")

    service: ComparisonService | None = getattr(
        app.state, "comparison_service", None
    )
    if service is not None:
        await service.shutdown()

    await close_redis_pool()

    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Uses the settings stored in ``app.state`` by the factory, falling back to
    the cached global settings.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()

    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)

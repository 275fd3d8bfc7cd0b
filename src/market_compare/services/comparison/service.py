"""Comparison service bridging HTTP requests and the comparison engine.

Provides methods for:
- Running a comparison for a pre-fetched snapshot
- Redis caching of results keyed by list, run parameters and snapshot digest
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

import orjson

from market_compare.cache.redis import get_cache_client
from market_compare.core.config import get_settings
from market_compare.observability.logging import get_logger
from market_compare.schemas.comparison import CompareResponse
from market_compare.schemas.enums import ComparisonStrategy
from market_compare.services.comparison.constants import COMPARISON_CACHE_KEY_PREFIX
from market_compare.services.comparison.engine import ComparisonEngine


if TYPE_CHECKING:
    from typing import Any

    from redis.asyncio import Redis

    from market_compare.core.config import ComparisonSettings
    from market_compare.schemas.comparison import CompareRequest

logger = get_logger(__name__)


class ComparisonService:
    """Service running vendor comparisons.

    Orchestrates:
    1. Strategy defaulting from configuration
    2. Redis cache lookups for requests carrying a list id
    3. The in-memory comparison engine
    4. Caching of the computed response

    Cache Strategy:
    - Cache key: "comparison:{list_id}:{radius}:{strategy}:{target}:{origin}:{digest}"
    - The digest covers list items, vendors and catalogs, so a changed
      snapshot never reuses a stale entry
    - TTL: ``comparison.cache_ttl`` seconds
    - Cache failures are logged and never fail a comparison
    """

    def __init__(
        self,
        cache_client: Redis[Any] | None = None,
        engine: ComparisonEngine | None = None,
        settings: ComparisonSettings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            cache_client: Optional Redis client for caching.
            engine: Optional pre-built comparison engine.
            settings: Optional comparison settings override.
        """
        self._settings = settings or get_settings().comparison
        self._cache_client = cache_client
        self._engine = engine or ComparisonEngine(self._settings)
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize service resources.

        Called during application startup. Falls back to no caching when
        Redis is unavailable or caching is disabled.
        """
        if not self._settings.cache_enabled:
            self._cache_client = None
        elif self._cache_client is None:
            try:
                self._cache_client = get_cache_client()
            except RuntimeError:
                logger.warning("Redis not available, caching disabled")

        self._initialized = True
        logger.info(
            "ComparisonService initialized",
            caching=self._cache_client is not None,
        )

    async def shutdown(self) -> None:
        """Cleanup service resources."""
        self._initialized = False
        logger.info("ComparisonService shutdown")

    async def compare(self, request: CompareRequest) -> CompareResponse:
        """Compare a shopping list across the vendors of a request.

        Args:
            request: Snapshot of list items, vendors and catalogs.

        Returns:
            Ranked vendor summaries.

        Raises:
            RuntimeError: If the service was not initialized.
        """
        if not self._initialized:
            msg = "ComparisonService not initialized"
            logger.error(msg)
            raise RuntimeError(msg)

        strategy = request.strategy or ComparisonStrategy(
            self._settings.default_strategy
        )

        radius_km = self._resolve_radius(request)

        cache_key = self._make_cache_key(request, strategy, radius_km)
        if cache_key is not None:
            cached = await self._get_from_cache(cache_key)
            if cached is not None:
                logger.debug("Cache hit for comparison", cache_key=cache_key)
                return cached.model_copy(update={"cached": True})

        results = await self._engine.compare(
            request.list_items,
            strategy,
            request.vendors,
            request.catalog_by_vendor,
            origin=request.user_location,
            radius_km=radius_km,
            target_vendor_id=request.target_vendor_id,
        )
        response = CompareResponse(strategy=strategy, results=results)

        if cache_key is not None:
            await self._cache_result(cache_key, response)

        return response

    def _resolve_radius(self, request: CompareRequest) -> float | None:
        """Default the radius for located requests that do not name one."""
        if request.radius_km is not None or request.target_vendor_id is not None:
            return request.radius_km
        if request.user_location is None:
            return None
        return self._settings.default_radius_km

    def _make_cache_key(
        self,
        request: CompareRequest,
        strategy: ComparisonStrategy,
        radius_km: float | None,
    ) -> str | None:
        """Generate the cache key, or None for requests without a list id."""
        if self._cache_client is None or not request.list_id:
            return None

        origin = "none"
        if request.user_location is not None:
            location = request.user_location
            origin = f"{location.latitude}:{location.longitude}"

        snapshot = request.model_dump(
            mode="json",
            include={"list_items", "vendors", "catalog_by_vendor"},
        )
        snapshot_hash = hashlib.sha256(
            orjson.dumps(snapshot, option=orjson.OPT_SORT_KEYS)
        ).hexdigest()[:16]

        return (
            f"{COMPARISON_CACHE_KEY_PREFIX}:{request.list_id}:{radius_km}:"
            f"{strategy.value}:{request.target_vendor_id or 'all'}:{origin}:"
            f"{snapshot_hash}"
        )

    async def _get_from_cache(self, cache_key: str) -> CompareResponse | None:
        """Get a cached comparison response."""
        if self._cache_client is None:
            return None

        try:
            data = await self._cache_client.get(cache_key)
            if data is None:
                return None
            return CompareResponse.model_validate(orjson.loads(data))
        except Exception as e:
            logger.warning(
                "Cache read failed",
                cache_key=cache_key,
                error=str(e),
            )
            return None

    async def _cache_result(self, cache_key: str, response: CompareResponse) -> None:
        """Cache a comparison response."""
        if self._cache_client is None:
            return

        try:
            data = orjson.dumps(response.model_dump(mode="json", by_alias=True))
            await self._cache_client.setex(cache_key, self._settings.cache_ttl, data)
            logger.debug(
                "Cached comparison",
                cache_key=cache_key,
                ttl=self._settings.cache_ttl,
            )
        except Exception as e:
            logger.warning(
                "Cache write failed",
                cache_key=cache_key,
                error=str(e),
            )

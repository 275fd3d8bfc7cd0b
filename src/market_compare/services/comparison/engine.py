"""Comparison engine entry point.

Selects the vendors to evaluate, evaluates each one concurrently against the
shopping list and ranks the results. The engine performs no I/O: every input is
an already-fetched, immutable snapshot.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from market_compare.core.config import get_settings
from market_compare.observability.logging import get_logger
from market_compare.services.comparison.aggregator import VendorAggregator
from market_compare.services.comparison.geo import GeoFilter, VendorDistance
from market_compare.services.comparison.ranker import rank_vendors
from market_compare.services.comparison.strategies import resolve_strategy
from market_compare.services.comparison.substitution_policy import SubstitutionPolicy
from market_compare.services.comparison.text_matcher import TextMatcher


if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from market_compare.core.config import ComparisonSettings
    from market_compare.schemas.comparison import (
        CatalogEntry,
        Coordinates,
        ListItem,
        Vendor,
        VendorSummary,
    )
    from market_compare.schemas.enums import ComparisonStrategy

logger = get_logger(__name__)


class ComparisonEngine:
    """Compares a shopping list across vendor catalogs.

    Run modes:
    - Target vendor: only ``target_vendor_id`` is evaluated; no radius filter,
      no ranking.
    - Radius: with ``origin`` and ``radius_km``, vendors outside the radius
      are dropped, the rest are ranked.
    - Neither: every supplied vendor is evaluated at distance 0 and ranked.
    """

    def __init__(self, settings: ComparisonSettings | None = None) -> None:
        if settings is None:
            settings = get_settings().comparison

        self.settings = settings
        self.matcher = TextMatcher(threshold=settings.similarity_threshold)
        self.policy = SubstitutionPolicy(settings.processed_keywords)
        self.geo = GeoFilter(
            exclude_missing_coordinates=settings.exclude_vendors_without_coordinates
        )
        self.rate_per_km = Decimal(str(settings.rate_per_km))

    async def compare(
        self,
        list_items: Sequence[ListItem],
        strategy: ComparisonStrategy | str,
        vendors: Sequence[Vendor],
        catalog_by_vendor: Mapping[str, Sequence[CatalogEntry]],
        *,
        origin: Coordinates | None = None,
        radius_km: float | None = None,
        target_vendor_id: str | None = None,
        now: datetime | None = None,
    ) -> list[VendorSummary]:
        """Compare ``list_items`` across ``vendors``.

        Args:
            list_items: The shopping list.
            strategy: ``cheapest`` or ``best_brands``.
            vendors: Candidate vendors.
            catalog_by_vendor: Catalog entries keyed by vendor id.
            origin: Requester location.
            radius_km: Search radius around ``origin``.
            target_vendor_id: Evaluate only this vendor.
            now: Timestamp used for vendors without any matched price.

        Returns:
            Vendor summaries; ranked unless a target vendor was requested.

        Raises:
            UnknownStrategyError: If ``strategy`` is not a known strategy.
        """
        match_strategy = resolve_strategy(
            strategy,
            brand_tolerance_band=self.settings.brand_tolerance_band,
        )

        if not list_items:
            logger.info("Empty shopping list, nothing to compare")
            return []

        selected = self._select_vendors(
            vendors,
            origin=origin,
            radius_km=radius_km,
            target_vendor_id=target_vendor_id,
        )
        if not selected:
            logger.info(
                "No vendors to compare",
                vendors=len(vendors),
                radius_km=radius_km,
                target_vendor_id=target_vendor_id,
            )
            return []

        aggregator = VendorAggregator(
            self.matcher,
            self.policy,
            match_strategy,
            rate_per_km=self.rate_per_km,
        )
        run_at = now or datetime.now(UTC)
        semaphore = asyncio.Semaphore(self.settings.max_concurrent_vendors)

        async def evaluate(measured: VendorDistance) -> VendorSummary:
            async with semaphore:
                return await asyncio.to_thread(
                    aggregator.summarize,
                    measured,
                    list_items,
                    catalog_by_vendor.get(measured.vendor.id, ()),
                    now=run_at,
                )

        # gather keeps input order, so results do not depend on scheduling
        summaries = list(await asyncio.gather(*(evaluate(m) for m in selected)))

        logger.info(
            "Comparison completed",
            strategy=match_strategy.name.value,
            items=len(list_items),
            vendors=len(summaries),
        )

        if target_vendor_id is not None:
            return summaries
        return rank_vendors(summaries)

    def _select_vendors(
        self,
        vendors: Sequence[Vendor],
        *,
        origin: Coordinates | None,
        radius_km: float | None,
        target_vendor_id: str | None,
    ) -> list[VendorDistance]:
        """Choose and measure the vendors evaluated in this run."""
        if target_vendor_id is not None:
            return [
                self.geo.measure(origin, vendor)
                for vendor in vendors
                if vendor.id == target_vendor_id
            ][:1]

        if origin is not None and radius_km is not None:
            return self.geo.within_radius(origin, vendors, radius_km)

        return [self.geo.measure(origin, vendor) for vendor in vendors]

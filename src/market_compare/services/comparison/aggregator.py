"""Per-vendor aggregation of item matches into a ``VendorSummary``."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from market_compare.schemas.comparison import VendorSummary
from market_compare.services.comparison.constants import (
    CENT,
    DEFAULT_RATE_PER_KM,
    ROUND_TRIP_FACTOR,
    ZERO,
)


if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from market_compare.schemas.comparison import CatalogEntry, ItemMatchResult, ListItem
    from market_compare.services.comparison.geo import VendorDistance
    from market_compare.services.comparison.strategies import MatchStrategy
    from market_compare.services.comparison.substitution_policy import (
        SubstitutionPolicy,
    )
    from market_compare.services.comparison.text_matcher import TextMatcher


def coverage_percent(matched: int, total: int) -> int:
    """Matched share of the list as a whole percentage, rounded half up."""
    if total <= 0:
        return 0
    ratio = Decimal(100 * matched) / Decimal(total)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def travel_cost(distance_km: float, rate_per_km: Decimal) -> Decimal:
    """Round-trip travel cost to a vendor, rounded to cents."""
    cost = Decimal(str(distance_km)) * ROUND_TRIP_FACTOR * rate_per_km
    return cost.quantize(CENT, rounding=ROUND_HALF_UP)


class VendorAggregator:
    """Matches every list item at one vendor and totals the outcome.

    Items are evaluated sequentially; instances hold no per-run state and may
    be shared by concurrent vendor tasks.
    """

    def __init__(
        self,
        matcher: TextMatcher,
        policy: SubstitutionPolicy,
        strategy: MatchStrategy,
        rate_per_km: Decimal = DEFAULT_RATE_PER_KM,
    ) -> None:
        self.matcher = matcher
        self.policy = policy
        self.strategy = strategy
        self.rate_per_km = rate_per_km

    def match_item(
        self,
        item: ListItem,
        catalog: Sequence[CatalogEntry],
    ) -> ItemMatchResult:
        """Run matcher, policy and strategy for one item."""
        candidates = self.matcher.candidates(item, catalog)
        admissible = self.policy.admissible(item, candidates)
        return self.strategy.select(item, admissible)

    def summarize(
        self,
        measured: VendorDistance,
        items: Sequence[ListItem],
        catalog: Sequence[CatalogEntry],
        *,
        now: datetime,
    ) -> VendorSummary:
        """Build the summary of one vendor for the whole list.

        Args:
            measured: The vendor with its distance from the requester.
            items: The shopping list.
            catalog: The vendor's catalog entries.
            now: Price-update timestamp used when nothing matched.
        """
        matches = [self.match_item(item, catalog) for item in items]

        matched = [m for m in matches if m.is_matched]
        missing_count = len(matches) - len(matched)
        substituted_count = sum(1 for m in matched if m.is_substitution)

        total_price = sum((m.line_total for m in matched), ZERO)
        if not matched:
            total_price = ZERO

        last_update = max(
            (m.matched_entry.last_updated_at for m in matched if m.matched_entry),
            default=now,
        )

        travel = travel_cost(measured.distance_km, self.rate_per_km)
        real_cost = total_price + travel if total_price > 0 else ZERO

        vendor = measured.vendor
        return VendorSummary(
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            vendor_address=vendor.address,
            total_price=total_price,
            distance_km=measured.distance_km,
            total_items=len(items),
            matched_count=len(matched),
            missing_count=missing_count,
            substituted_count=substituted_count,
            coverage_percent=coverage_percent(len(matched), len(items)),
            travel_cost=travel,
            real_cost=real_cost,
            last_price_update=last_update,
            matches=matches,
        )

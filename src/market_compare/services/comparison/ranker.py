"""Ordering of vendor summaries and choice of the recommended vendor."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable

    from market_compare.schemas.comparison import VendorSummary


def is_viable(summary: VendorSummary) -> bool:
    """Whether a vendor can serve any part of the list."""
    return summary.total_price > 0 and summary.coverage_percent > 0


def rank_vendors(summaries: Iterable[VendorSummary]) -> list[VendorSummary]:
    """Order viable vendors by missing items, then travel-adjusted cost.

    The sort is stable, so equal keys keep input order. The returned summaries
    are new copies; only the first is marked as recommended.
    """
    ordered = sorted(
        (s for s in summaries if is_viable(s)),
        key=lambda s: (s.missing_count, s.real_cost),
    )
    return [
        summary.model_copy(update={"is_recommended": position == 0})
        for position, summary in enumerate(ordered)
    ]

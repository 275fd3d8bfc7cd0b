"""Strategies choosing one catalog entry among admissible candidates.

Two interchangeable strategies are selected per comparison run:

- ``CheapestStrategy`` minimizes price.
- ``BestBrandStrategy`` stays within a tight similarity band around the best
  textual match, prefers the requested brand, and otherwise takes the most
  expensive relevant entry as a proxy for a premium product.

Both return ``MatchType.MISSING`` when no candidate is admissible.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from market_compare.schemas.comparison import ItemMatchResult
from market_compare.schemas.enums import ComparisonStrategy, MatchType
from market_compare.services.comparison.constants import (
    DEFAULT_BRAND_TOLERANCE_BAND,
    ZERO,
)
from market_compare.services.comparison.exceptions import UnknownStrategyError


if TYPE_CHECKING:
    from collections.abc import Sequence

    from market_compare.schemas.comparison import ListItem
    from market_compare.services.comparison.text_matcher import MatchCandidate


@runtime_checkable
class MatchStrategy(Protocol):
    """Interface shared by all matching strategies."""

    name: ComparisonStrategy

    def select(
        self,
        item: ListItem,
        candidates: Sequence[MatchCandidate],
    ) -> ItemMatchResult:
        """Pick the entry for ``item`` among admissible ``candidates``.

        Args:
            item: The list item being matched.
            candidates: Admissible candidates, best score first.

        Returns:
            Exactly one result, ``missing`` when ``candidates`` is empty.
        """
        ...


def build_result(item: ListItem, chosen: MatchCandidate | None) -> ItemMatchResult:
    """Turn a strategy's choice into an ``ItemMatchResult``.

    The identity match is reported as ``exact``; any other entry is a
    substitution made by the strategy.
    """
    if chosen is None:
        return ItemMatchResult(
            list_item_id=item.id,
            original_name=item.canonical_name,
            match_type=MatchType.MISSING,
            line_total=ZERO,
        )

    price = chosen.entry.price if chosen.entry.price is not None else ZERO
    match_type = (
        MatchType.EXACT if chosen.is_identity else MatchType.STRATEGY_SUBSTITUTED
    )
    return ItemMatchResult(
        list_item_id=item.id,
        original_name=item.canonical_name,
        match_type=match_type,
        is_substitution=match_type == MatchType.STRATEGY_SUBSTITUTED,
        matched_entry=chosen.entry,
        line_total=price * item.desired_quantity,
    )


def _price(candidate: MatchCandidate) -> Decimal:
    return candidate.entry.price if candidate.entry.price is not None else ZERO


class CheapestStrategy:
    """Picks the lowest-priced admissible candidate.

    A pricier identity match loses to a cheaper substitute. On equal prices
    the better-scored candidate wins.
    """

    name = ComparisonStrategy.CHEAPEST

    def select(
        self,
        item: ListItem,
        candidates: Sequence[MatchCandidate],
    ) -> ItemMatchResult:
        if not candidates:
            return build_result(item, None)
        return build_result(item, min(candidates, key=_price))


class BestBrandStrategy:
    """Picks the requested brand, else the priciest closely-matching entry."""

    name = ComparisonStrategy.BEST_BRANDS

    def __init__(self, tolerance: float = DEFAULT_BRAND_TOLERANCE_BAND) -> None:
        self.tolerance = tolerance

    def relevant_band(
        self,
        candidates: Sequence[MatchCandidate],
    ) -> list[MatchCandidate]:
        """Candidates scoring within ``tolerance`` of the best score."""
        if not candidates:
            return []
        ceiling = min(c.score for c in candidates) + self.tolerance
        return [c for c in candidates if c.score <= ceiling]

    def select(
        self,
        item: ListItem,
        candidates: Sequence[MatchCandidate],
    ) -> ItemMatchResult:
        relevant = self.relevant_band(candidates)
        if not relevant:
            return build_result(item, None)

        wanted = (item.brand or "").strip().casefold()
        if wanted:
            for candidate in relevant:
                brand = (candidate.entry.brand or "").strip().casefold()
                if brand and wanted in brand:
                    return build_result(item, candidate)

        return build_result(item, max(relevant, key=_price))


def resolve_strategy(
    strategy: ComparisonStrategy | str,
    *,
    brand_tolerance_band: float = DEFAULT_BRAND_TOLERANCE_BAND,
) -> MatchStrategy:
    """Build the strategy for a run-level strategy name.

    Raises:
        UnknownStrategyError: If ``strategy`` names no known strategy.
    """
    try:
        kind = ComparisonStrategy(strategy)
    except ValueError:
        raise UnknownStrategyError(str(strategy)) from None

    if kind is ComparisonStrategy.CHEAPEST:
        return CheapestStrategy()
    return BestBrandStrategy(tolerance=brand_tolerance_band)

"""Exclusion rules for substitutes of a different product category.

Someone asking for "Batata" wants fresh potatoes, not "Batata Congelada".
The rule is asymmetric on purpose: a processed request may still be served by a
fresh product.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from market_compare.services.comparison.constants import DEFAULT_PROCESSED_KEYWORDS


if TYPE_CHECKING:
    from collections.abc import Iterable

    from market_compare.schemas.comparison import ListItem
    from market_compare.services.comparison.text_matcher import MatchCandidate


class SubstitutionPolicy:
    """Classifies names as processed and filters inadmissible candidates."""

    def __init__(self, keywords: Iterable[str] | None = None) -> None:
        source = DEFAULT_PROCESSED_KEYWORDS if keywords is None else keywords
        self.keywords: frozenset[str] = frozenset(
            k.strip().casefold() for k in source if k.strip()
        )

    def is_processed(self, name: str) -> bool:
        """Whether ``name`` contains any processed marker."""
        lowered = name.casefold()
        return any(keyword in lowered for keyword in self.keywords)

    def admissible(
        self,
        item: ListItem,
        candidates: Iterable[MatchCandidate],
    ) -> list[MatchCandidate]:
        """Drop processed candidates for a fresh request, keeping order.

        The identity match is never dropped.
        """
        if self.is_processed(item.canonical_name):
            return list(candidates)

        return [
            candidate
            for candidate in candidates
            if candidate.is_identity or not self.is_processed(candidate.entry.name)
        ]

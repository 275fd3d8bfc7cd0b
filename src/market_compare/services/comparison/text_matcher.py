"""Fuzzy matching of list item names against one vendor's catalog.

Scores are distances: 0 means identical names, 1 means nothing in common.
The requested product itself (same ``product_id``) always enters the candidate
set with a score of 0, whatever its listed name.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from market_compare.observability.logging import get_logger
from market_compare.services.comparison.constants import (
    DEFAULT_SIMILARITY_THRESHOLD,
    IDENTITY_SCORE,
    PARTIAL_WEIGHT,
    SCORE_PRECISION,
    TOKEN_SET_WEIGHT,
)


if TYPE_CHECKING:
    from collections.abc import Iterable

    from market_compare.schemas.comparison import CatalogEntry, ListItem

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """A catalog entry considered for one list item."""

    entry: CatalogEntry
    score: float
    is_identity: bool = False


def normalize_name(name: str) -> str:
    """Lowercase, strip punctuation and fold accents ("Feijão" -> "feijao")."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return default_process(stripped)


def name_distance(target: str, candidate: str) -> float:
    """Distance between two product names in ``[0, 1]``.

    Token-set similarity handles word order and extra words ("Arroz" vs
    "Arroz Tio João"); partial similarity handles substrings and small typos.
    """
    left = normalize_name(target)
    right = normalize_name(candidate)
    if not left or not right:
        return 1.0

    similarity = (
        TOKEN_SET_WEIGHT * fuzz.token_set_ratio(left, right)
        + PARTIAL_WEIGHT * fuzz.partial_ratio(left, right)
    )
    return round(1.0 - similarity / 100.0, SCORE_PRECISION)


class TextMatcher:
    """Builds the ranked candidate set for one item at one vendor."""

    def __init__(self, threshold: float = DEFAULT_SIMILARITY_THRESHOLD) -> None:
        self.threshold = threshold

    def candidates(
        self,
        item: ListItem,
        catalog: Iterable[CatalogEntry],
    ) -> list[MatchCandidate]:
        """Return candidates scoring below the threshold, best first.

        Entries without a price are skipped. Ties keep catalog order.
        """
        found: list[MatchCandidate] = []
        identity_seen = False

        for entry in catalog:
            if entry.price is None:
                logger.debug(
                    "Skipping catalog entry without price",
                    vendor_id=entry.vendor_id,
                    product_id=entry.product_id,
                )
                continue

            if not identity_seen and entry.product_id == item.product_id:
                identity_seen = True
                found.append(MatchCandidate(entry, IDENTITY_SCORE, is_identity=True))
                continue

            score = name_distance(item.canonical_name, entry.name)
            if score < self.threshold:
                found.append(MatchCandidate(entry, score))

        return sorted(found, key=lambda candidate: candidate.score)

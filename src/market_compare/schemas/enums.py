"""Enumeration types for comparison schemas."""

from __future__ import annotations

from enum import StrEnum


class ComparisonStrategy(StrEnum):
    """Run-level strategy used to pick one catalog entry per list item."""

    CHEAPEST = "cheapest"
    BEST_BRANDS = "best_brands"


class MatchType(StrEnum):
    """Outcome of matching one list item against one vendor's catalog."""

    EXACT = "exact"
    STRATEGY_SUBSTITUTED = "strategy-substituted"
    MISSING = "missing"

"""Vendor comparison module.

Matches a shopping list against vendor catalogs and ranks vendors by coverage
and travel-adjusted cost.
"""

from market_compare.services.comparison.engine import ComparisonEngine
from market_compare.services.comparison.exceptions import (
    ComparisonError,
    UnknownStrategyError,
)
from market_compare.services.comparison.service import ComparisonService


__all__ = [
    "ComparisonEngine",
    "ComparisonError",
    "ComparisonService",
    "UnknownStrategyError",
]

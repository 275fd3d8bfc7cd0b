"""Pydantic schemas for the comparison API and engine."""

from market_compare.schemas.comparison import (
    CatalogEntry,
    CompareRequest,
    CompareResponse,
    Coordinates,
    ItemMatchResult,
    ListItem,
    Vendor,
    VendorSummary,
)
from market_compare.schemas.enums import ComparisonStrategy, MatchType


__all__ = [
    "CatalogEntry",
    "CompareRequest",
    "CompareResponse",
    "ComparisonStrategy",
    "Coordinates",
    "ItemMatchResult",
    "ListItem",
    "MatchType",
    "Vendor",
    "VendorSummary",
]

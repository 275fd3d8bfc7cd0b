"""Vendor comparison schemas.

Input snapshot models (list items, catalog entries, vendors), engine results
(per-item matches and per-vendor summaries) and the HTTP request/response
envelopes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

from pydantic import ConfigDict, Field, field_validator, model_validator

from market_compare.schemas.base import APIRequest, APIResponse
from market_compare.schemas.enums import ComparisonStrategy, MatchType


# =============================================================================
# Input Snapshot
# =============================================================================


class Coordinates(APIRequest):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class ListItem(APIRequest):
    """One desired product of a shopping list."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="List item identifier")
    product_id: str = Field(..., min_length=1, description="Requested product")
    canonical_name: str = Field(..., min_length=1, description="Product name")
    brand: str | None = Field(default=None, description="Requested brand")
    desired_quantity: int = Field(default=1, ge=1, description="Units wanted")


class CatalogEntry(APIRequest):
    """A vendor-specific price for one product.

    Entries without a price are accepted at the boundary and skipped by the
    matcher.
    """

    model_config = ConfigDict(frozen=True)

    vendor_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., description="Product name as listed by the vendor")
    brand: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    last_updated_at: datetime = Field(..., description="When the price was captured")

    @field_validator("last_updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Read timestamps without an offset as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class Vendor(APIRequest):
    """A store with an optional location."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None


# =============================================================================
# Engine Results
# =============================================================================


class ItemMatchResult(APIResponse):
    """The catalog entry chosen for one list item at one vendor."""

    model_config = ConfigDict(frozen=True)

    list_item_id: str
    original_name: str
    match_type: MatchType
    is_substitution: bool = False
    matched_entry: CatalogEntry | None = None
    line_total: Decimal = Decimal(0)

    @property
    def is_matched(self) -> bool:
        """Whether any catalog entry was chosen."""
        return self.match_type != MatchType.MISSING

    @model_validator(mode="after")
    def _check_consistency(self) -> ItemMatchResult:
        if self.is_matched != (self.matched_entry is not None):
            msg = "matched_entry must be set exactly when the item is matched"
            raise ValueError(msg)
        if self.is_substitution != (self.match_type == MatchType.STRATEGY_SUBSTITUTED):
            msg = "is_substitution must be set exactly for strategy-substituted matches"
            raise ValueError(msg)
        return self


class VendorSummary(APIResponse):
    """Aggregated comparison outcome for one vendor."""

    model_config = ConfigDict(frozen=True)

    vendor_id: str
    vendor_name: str
    vendor_address: str | None = None
    total_price: Decimal = Field(..., ge=0)
    distance_km: float = Field(..., ge=0)
    total_items: int = Field(..., ge=0)
    matched_count: int = Field(..., ge=0)
    missing_count: int = Field(..., ge=0)
    substituted_count: int = Field(..., ge=0)
    coverage_percent: int = Field(..., ge=0, le=100)
    travel_cost: Decimal = Field(..., ge=0)
    real_cost: Decimal = Field(..., ge=0)
    last_price_update: datetime
    is_recommended: bool = False
    matches: list[ItemMatchResult] = Field(default_factory=list)


# =============================================================================
# HTTP Envelopes
# =============================================================================


class CompareRequest(APIRequest):
    """Pre-fetched snapshot plus run parameters for one comparison."""

    list_id: str | None = Field(
        default=None,
        description="Shopping list identifier, used as the cache key",
    )
    list_items: list[ListItem] = Field(default_factory=list)
    strategy: ComparisonStrategy | None = Field(
        default=None,
        description="Matching strategy; the configured default when omitted",
    )
    vendors: list[Vendor] = Field(default_factory=list)
    catalog_by_vendor: dict[str, list[CatalogEntry]] = Field(default_factory=dict)
    user_location: Coordinates | None = None
    radius_km: float | None = Field(default=None, gt=0)
    target_vendor_id: str | None = Field(
        default=None,
        description="Evaluate a single vendor without radius filtering or ranking",
    )


class CompareResponse(APIResponse):
    """Ranked vendor summaries for one comparison run."""

    success: bool = True
    strategy: ComparisonStrategy
    results: list[VendorSummary] = Field(default_factory=list)
    cached: bool = False

"""Constants for the vendor comparison engine.

Contains:
- Geographic constants
- Matching thresholds and scoring weights
- Default processed/prepared product markers
- Cache configuration
"""

from __future__ import annotations

from decimal import Decimal
from typing import Final


# =============================================================================
# Geography
# =============================================================================

EARTH_RADIUS_KM: Final[float] = 6371.0

# Travel is priced as a round trip to the vendor
ROUND_TRIP_FACTOR: Final[int] = 2
DEFAULT_RATE_PER_KM: Final[Decimal] = Decimal("1.5")


# =============================================================================
# Matching
# =============================================================================

DEFAULT_SIMILARITY_THRESHOLD: Final[float] = 0.45
DEFAULT_BRAND_TOLERANCE_BAND: Final[float] = 0.10

# Weights of the rapidfuzz scorers combined into one similarity
TOKEN_SET_WEIGHT: Final[float] = 0.6
PARTIAL_WEIGHT: Final[float] = 0.4

IDENTITY_SCORE: Final[float] = 0.0
SCORE_PRECISION: Final[int] = 4

# Markers of processed or prepared forms (case-insensitive substrings).
# A fresh product must never be replaced by one of these.
DEFAULT_PROCESSED_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        # Portuguese
        "congelad",
        "congelada",
        "congelado",
        "frita",
        "frito",
        "pré-frita",
        "pre-frita",
        "empanad",
        "empanado",
        "empanada",
        "pronto",
        "pronta",
        "nuggets",
        "hamburguer",
        "lasanha",
        "pizza",
        # English
        "frozen",
        "breaded",
        "pre-fried",
        "ready-to-eat",
        "ready meal",
        "burger",
        "lasagna",
    }
)


# =============================================================================
# Money
# =============================================================================

CENT: Final[Decimal] = Decimal("0.01")
ZERO: Final[Decimal] = Decimal(0)


# =============================================================================
# Cache Configuration
# =============================================================================

COMPARISON_CACHE_KEY_PREFIX: Final[str] = "comparison"

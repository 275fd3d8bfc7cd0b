"""Vendor comparison endpoints.

Provides:
- POST /comparisons for ranking vendors against a shopping list
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from market_compare.api.dependencies import get_comparison_service
from market_compare.core.exceptions import BadRequestException
from market_compare.observability.logging import bind_context, get_logger
from market_compare.schemas.comparison import CompareRequest, CompareResponse
from market_compare.services.comparison.exceptions import UnknownStrategyError
from market_compare.services.comparison.service import ComparisonService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(tags=["Comparisons"])


@router.post(
    "/comparisons",
    response_model=CompareResponse,
    summary="Compare a shopping list across nearby vendors",
    description=(
        "Matches every list item against each vendor's price catalog, totals "
        "the cost per vendor including round-trip travel, and ranks vendors by "
        "missing items then travel-adjusted cost. With targetVendorId only that "
        "vendor is evaluated and no ranking is applied. An empty list or no "
        "vendor in range returns an empty result."
    ),
    responses={
        400: {
            "description": "Unknown comparison strategy",
            "content": {
                "application/json": {
                    "example": {
                        "error": "UNKNOWN_STRATEGY",
                        "message": "Unknown comparison strategy: 'fastest'",
                    }
                }
            },
        },
        422: {"description": "Invalid request body"},
        503: {"description": "Comparison service unavailable"},
    },
)
async def compare_vendors(
    request: CompareRequest,
    service: Annotated[ComparisonService, Depends(get_comparison_service)],
) -> CompareResponse:
    """Rank vendors for a shopping list.

    Args:
        request: Pre-fetched list items, vendors and catalogs plus run options.
        service: Comparison service.

    Returns:
        Vendor summaries, best vendor first.

    Raises:
        BadRequestException: 400 if the strategy is unknown.
    """
    if request.list_id:
        bind_context(list_id=request.list_id)

    logger.info(
        "Comparison requested",
        items=len(request.list_items),
        vendors=len(request.vendors),
        strategy=request.strategy,
        radius_km=request.radius_km,
        target_vendor_id=request.target_vendor_id,
    )

    try:
        return await service.compare(request)
    except UnknownStrategyError as e:
        raise BadRequestException(str(e), error="UNKNOWN_STRATEGY") from e

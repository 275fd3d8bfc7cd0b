"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in app.state.
"""

from __future__ import annotations

from fastapi import Request

from market_compare.core.exceptions import ServiceUnavailableException
from market_compare.services.comparison.service import ComparisonService


async def get_comparison_service(request: Request) -> ComparisonService:
    """Get the comparison service from app state.

    Raises:
        ServiceUnavailableException: 503 if service is not initialized.
    """
    service: ComparisonService | None = getattr(
        request.app.state, "comparison_service", None
    )
    if service is None:
        raise ServiceUnavailableException("Comparison service not available")
    return service

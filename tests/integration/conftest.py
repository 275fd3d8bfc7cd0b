"""Integration test fixtures.

Runs the assembled application, lifespan included, in-process. The test
environment disables the Redis cache, so no external services are needed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from market_compare.core.config import Settings
from market_compare.core.events import lifespan
from market_compare.factory import create_app


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


pytestmark = pytest.mark.integration


@pytest.fixture
def test_settings() -> Settings:
    """Settings for the test environment."""
    return Settings(APP_ENV="test")


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """Application with startup and shutdown run around the test."""
    application = create_app(test_settings)
    # Keep the pytest log capture intact
    with patch("market_compare.core.events.lifespan.setup_logging"):
        async with lifespan(application):
            yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

"""Shared test fixtures and configuration for the Market Compare service tests.

The test environment is selected before any application module is imported,
so the cached settings load ``config/environments/test``.
"""

from __future__ import annotations

import os


os.environ.setdefault("APP_ENV", "test")

from typing import TYPE_CHECKING  # noqa: E402

import pytest  # noqa: E402

from market_compare.core.config import ComparisonSettings  # noqa: E402
from market_compare.observability.logging import clear_context  # noqa: E402
from market_compare.services.comparison.engine import ComparisonEngine  # noqa: E402
from tests.factories.comparison import NOW  # noqa: E402


if TYPE_CHECKING:
    from collections.abc import Generator
    from datetime import datetime


@pytest.fixture(autouse=True)
def reset_log_context() -> Generator[None]:
    """Keep bound logging context from leaking between tests."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def now() -> datetime:
    """Fixed comparison timestamp."""
    return NOW


@pytest.fixture
def comparison_settings() -> ComparisonSettings:
    """Engine settings with defaults and caching disabled."""
    return ComparisonSettings(cache_enabled=False)


@pytest.fixture
def engine(comparison_settings: ComparisonSettings) -> ComparisonEngine:
    """Comparison engine built from the default settings."""
    return ComparisonEngine(comparison_settings)

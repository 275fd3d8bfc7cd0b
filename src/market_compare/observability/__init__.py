"""Observability components: structured logging."""

from market_compare.observability.logging import get_logger, setup_logging


__all__ = ["get_logger", "setup_logging"]

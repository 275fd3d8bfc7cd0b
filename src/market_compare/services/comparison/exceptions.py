"""Exceptions for the comparison service.

Empty lists and empty vendor sets are not errors: the engine returns an empty
result for them. Malformed catalog entries and vendors without coordinates are
skipped or degraded locally. Only configuration mistakes are raised.
"""

from __future__ import annotations


class ComparisonError(Exception):
    """Base exception for comparison service errors."""


class UnknownStrategyError(ComparisonError):
    """Raised when a run asks for a strategy that does not exist.

    Rejected before any vendor is evaluated rather than silently falling back
    to the default strategy.
    """

    def __init__(self, strategy: str) -> None:
        """Initialize the exception.

        Args:
            strategy: The strategy name that was requested.
        """
        self.strategy = strategy
        super().__init__(f"Unknown comparison strategy: {strategy!r}")

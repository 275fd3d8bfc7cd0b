"""Application lifecycle events."""

from market_compare.core.events.lifespan import lifespan


__all__ = ["lifespan"]

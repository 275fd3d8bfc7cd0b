"""HTTP middleware."""

from market_compare.core.middleware.logging import LoggingMiddleware
from market_compare.core.middleware.request_id import RequestIDMiddleware


__all__ = ["LoggingMiddleware", "RequestIDMiddleware"]

"""Custom middleware components."""

from allergen_finder.core.middleware.logging import LoggingMiddleware
from allergen_finder.core.middleware.request_id import RequestIDMiddleware


__all__ = ["LoggingMiddleware", "RequestIDMiddleware"]

"""Request logging middleware.

Screening requests make many sequential outbound calls, so completions
slower than a threshold are logged at warning level.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from allergen_finder.observability.logging import bind_context, get_logger


if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp


logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for structured request/response logging."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        exclude_paths: set[str] | None = None,
        slow_request_seconds: float = 60.0,
    ) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths or {"/favicon.ico"}
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request and response."""
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        bind_context(
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
        )
        logger.info("Request started")

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        elapsed_ms = round(elapsed * 1000, 2)

        level = "WARNING" if elapsed >= self.slow_request_seconds else "INFO"
        logger.log(
            level,
            "Request completed",
            status_code=response.status_code,
            process_time_ms=elapsed_ms,
        )
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from request, considering proxies."""
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"

"""Application exceptions and exception handlers.

Every error leaves the service as a JSON payload of the form
``{"ok": false, "error": <TAG>, "detail": <str>, "requestId": <str>}``;
no handler ever renders an HTML error page.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from allergen_finder.observability.logging import get_logger
from allergen_finder.schemas.search import ErrorResponse
from allergen_finder.services.screening.exceptions import (
    ConfigurationError,
    MalformedInputError,
    UpstreamUnavailableError,
)


if TYPE_CHECKING:
    from fastapi import Request


logger = get_logger(__name__)


class AppError(Exception):
    """Base application exception.

    All API-level exceptions inherit from this class for consistent
    error payloads.
    """

    def __init__(self, status_code: int, error: str, detail: str) -> None:
        self.status_code = status_code
        self.error = error
        self.detail = detail
        super().__init__(detail)


class ServiceUnavailableError(AppError):
    """A service was not initialized at startup."""

    def __init__(self, detail: str = "Service temporarily unavailable") -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="SERVICE_UNAVAILABLE",
            detail=detail,
        )


def _get_request_id(request: Request) -> str | None:
    """Extract request ID from request state."""
    return getattr(request.state, "request_id", None)


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    detail: str,
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error,
            detail=detail,
            request_id=_get_request_id(request),
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""

    @app.exception_handler(AppError)
    async def app_exception_handler(
        request: Request,
        exc: AppError,
    ) -> ORJSONResponse:
        """Handle custom application exceptions."""
        return _error_response(request, exc.status_code, exc.error, exc.detail)

    @app.exception_handler(MalformedInputError)
    async def malformed_input_handler(
        request: Request,
        exc: MalformedInputError,
    ) -> ORJSONResponse:
        """Handle requests rejected by the screening service."""
        return _error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            "MALFORMED_INPUT",
            str(exc),
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(
        request: Request,
        exc: ConfigurationError,
    ) -> ORJSONResponse:
        """Handle a missing collaborator credential."""
        logger.error("Configuration error", error=str(exc))
        return _error_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "CONFIGURATION_ERROR",
            str(exc),
        )

    @app.exception_handler(UpstreamUnavailableError)
    async def upstream_unavailable_handler(
        request: Request,
        exc: UpstreamUnavailableError,
    ) -> ORJSONResponse:
        """Handle an upstream failure that escaped per-category recovery."""
        return _error_response(
            request,
            status.HTTP_502_BAD_GATEWAY,
            "UPSTREAM_UNAVAILABLE",
            str(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> ORJSONResponse:
        """Handle Starlette HTTP exceptions."""
        return _error_response(
            request,
            exc.status_code,
            "HTTP_ERROR",
            str(exc.detail),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> ORJSONResponse:
        """Handle Pydantic validation errors."""
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return _error_response(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "MALFORMED_INPUT",
            problems or "Request validation failed",
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> ORJSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception", exc_info=exc)
        return _error_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "SEARCH_FAILED",
            str(exc) or exc.__class__.__name__,
        )

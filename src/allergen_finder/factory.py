"""Application factory for creating FastAPI instances.

This module provides the create_app factory function that:
- Configures the FastAPI application with appropriate settings
- Sets up the middleware stack
- Registers exception handlers
- Mounts API routers
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from allergen_finder.api.v1.router import router as v1_router
from allergen_finder.core.config import Settings, get_settings
from allergen_finder.core.events import lifespan
from allergen_finder.core.exceptions import setup_exception_handlers
from allergen_finder.core.middleware import LoggingMiddleware, RequestIDMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure a FastAPI application instance.

    Args:
        settings: Optional settings override. If not provided, uses get_settings().

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    docs_enabled = settings.is_non_production
    app = FastAPI(
        title=settings.app.name,
        version=settings.app.version,
        description="Allergen-screened product finder API",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        debug=settings.app.debug,
    )

    # Store settings in app state for the lifespan and routes
    app.state.settings = settings

    setup_exception_handlers(app)
    _setup_middleware(app, settings)
    _setup_routers(app, settings)

    return app


def _setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure middleware stack.

    Middleware is executed in reverse order of addition, so the request ID
    is bound before the logging middleware writes its first record.
    """
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.api.cors_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID"],
        )

    app.add_middleware(
        LoggingMiddleware,
        exclude_paths={
            f"{settings.api.v1_prefix}/health",
            f"{settings.api.v1_prefix}/ready",
            "/favicon.ico",
        },
    )
    app.add_middleware(RequestIDMiddleware)


def _setup_routers(app: FastAPI, settings: Settings) -> None:
    """Mount API routers.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    app.include_router(v1_router, prefix=settings.api.v1_prefix)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint returning basic service info."""
        return {
            "service": settings.app.name,
            "version": settings.app.version,
            "docs": "/docs" if settings.is_non_production else "disabled",
        }

"""Application lifespan event handlers.

Builds the screening collaborators once at startup (including the single
process-wide image cache), stores them on ``app.state`` and closes their
HTTP clients at shutdown.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from allergen_finder.clients.serpapi import SerpApiClient
from allergen_finder.core.config import Settings, get_settings
from allergen_finder.llm.client import ChatCompletionClient
from allergen_finder.observability.logging import get_logger, setup_logging
from allergen_finder.services.candidates import CandidateSource
from allergen_finder.services.extraction import IngredientExtractor
from allergen_finder.services.images import ImageCache, ImageResolver
from allergen_finder.services.screening.service import ScreeningService
from allergen_finder.services.summary import SummaryService


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from fastapi import FastAPI


logger = get_logger(__name__)


async def _startup(app: FastAPI, settings: Settings) -> None:
    """Initialize all application services during startup.

    Args:
        app: The FastAPI application instance.
        settings: Application settings.
    """
    setup_logging(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        is_development=settings.is_development,
    )
    logger.info(
        "Starting application",
        app_name=settings.app.name,
        environment=settings.APP_ENV,
        debug=settings.app.debug,
    )

    if not settings.SERPAPI_API_KEY:
        logger.warning("SERPAPI_API_KEY not set - searches will be rejected")

    app.state.resources = []

    serpapi = SerpApiClient(settings)
    await serpapi.initialize()
    app.state.resources.append(serpapi)

    extractor = IngredientExtractor(settings)
    await extractor.initialize()
    app.state.resources.append(extractor)

    image_cache = ImageCache(settings.images.cache_capacity)
    app.state.image_cache = image_cache

    image_resolver: ImageResolver | None = None
    if settings.images.enabled:
        image_resolver = ImageResolver(image_cache, settings)
        await image_resolver.initialize()
        app.state.resources.append(image_resolver)

    app.state.screening_service = ScreeningService(
        CandidateSource(
            serpapi,
            location_bias_enabled=settings.screening.location_bias_enabled,
        ),
        extractor,
        image_resolver,
        settings.screening,
    )

    app.state.summary_service = await _init_summary_service(app, settings)

    logger.info("Application startup complete")


async def _init_summary_service(
    app: FastAPI,
    settings: Settings,
) -> SummaryService | None:
    """Initialize the optional summary service (non-critical)."""
    if not settings.summarization_available:
        logger.info("Summarization disabled or LLM_API_KEY not set")
        return None
    try:
        llm_client = ChatCompletionClient.from_settings(
            settings.llm,
            settings.LLM_API_KEY,
        )
        await llm_client.initialize()
    except Exception:
        logger.exception("Failed to initialize LLM client - summaries unavailable")
        return None

    app.state.resources.append(llm_client)
    return SummaryService(
        llm_client,
        timeout=settings.llm.total_timeout,
        temperature=settings.llm.temperature,
    )


async def _shutdown(app: FastAPI) -> None:
    """Shutdown all application services.

    Args:
        app: The FastAPI application instance.
    """
    logger.info("Shutting down application")

    for resource in reversed(getattr(app.state, "resources", [])):
        try:
            await resource.shutdown()
        except Exception:
            logger.exception(
                "Failed to shut down resource",
                resource=type(resource).__name__,
            )

    app.state.resources = []
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None - control returns to the application to handle requests.
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    await _startup(app, settings)
    try:
        yield
    finally:
        await _shutdown(app)

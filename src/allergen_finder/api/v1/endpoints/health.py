"""Health check endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from allergen_finder.core.config import Settings, get_settings
from allergen_finder.schemas.enums import HealthStatus
from allergen_finder.schemas.health import HealthResponse, ReadinessResponse


router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Basic health check to verify the service is running.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Check if the service is alive. Does not check collaborators."""
    return HealthResponse(
        status=HealthStatus.HEALTHY,
        version=settings.app.version,
        environment=settings.APP_ENV,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Reports whether the search and summary collaborators are usable.",
)
async def readiness_check(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> ReadinessResponse:
    """Report collaborator configuration without calling them."""
    state = request.app.state
    dependencies = {
        "search": "configured" if settings.SERPAPI_API_KEY else "missing_credential",
        "summary": (
            "available"
            if getattr(state, "summary_service", None) is not None
            else "disabled"
        ),
    }
    cache = getattr(state, "image_cache", None)
    if cache is not None:
        dependencies["image_cache"] = f"{len(cache)}/{cache.capacity}"

    ready = (
        getattr(state, "screening_service", None) is not None
        and bool(settings.SERPAPI_API_KEY)
    )
    return ReadinessResponse(
        status=HealthStatus.HEALTHY if ready else HealthStatus.DEGRADED,
        version=settings.app.version,
        environment=settings.APP_ENV,
        dependencies=dependencies,
    )

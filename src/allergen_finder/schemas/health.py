"""Health check schemas."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import Field

from allergen_finder.schemas.base import APIResponse
from allergen_finder.schemas.enums import HealthStatus


class HealthResponse(APIResponse):
    """Liveness probe response."""

    status: HealthStatus = Field(..., description="Health status")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Current server timestamp",
    )
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")


class ReadinessResponse(HealthResponse):
    """Readiness probe response with collaborator status."""

    dependencies: dict[str, str] = Field(
        default_factory=dict,
        description="Status of external collaborators",
    )

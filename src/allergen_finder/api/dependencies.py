"""FastAPI dependencies for service access.

Services are initialized during application startup and stored in
app.state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request

from allergen_finder.core.exceptions import ServiceUnavailableError


if TYPE_CHECKING:
    from allergen_finder.services.screening.service import ScreeningService
    from allergen_finder.services.summary import SummaryService


async def get_screening_service(request: Request) -> ScreeningService:
    """Get the screening service from app state.

    Raises:
        ServiceUnavailableError: 503 if the service is not initialized.
    """
    service: ScreeningService | None = getattr(
        request.app.state, "screening_service", None
    )
    if service is None:
        msg = "Screening service not available"
        raise ServiceUnavailableError(msg)
    return service


async def get_summary_service(request: Request) -> SummaryService | None:
    """Get the optional summary service; None when summaries are disabled."""
    return getattr(request.app.state, "summary_service", None)

"""Allergen-screened product search endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from allergen_finder.api.dependencies import get_screening_service, get_summary_service
from allergen_finder.mappers.search import (
    build_screening_request,
    build_search_response,
)
from allergen_finder.observability.logging import get_logger
from allergen_finder.schemas.search import ErrorResponse, SearchRequest, SearchResponse
from allergen_finder.services.screening.service import ScreeningService  # noqa: TC001
from allergen_finder.services.summary import SummaryService  # noqa: TC001


logger = get_logger(__name__)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Search for allergen-screened products",
    description=(
        "Searches each category, screens candidate ingredient lists against the "
        "expanded allergen set and returns a ranked shortlist per category."
    ),
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
    },
)
async def search(
    body: SearchRequest,
    screening: Annotated[ScreeningService, Depends(get_screening_service)],
    summarizer: Annotated[SummaryService | None, Depends(get_summary_service)],
) -> SearchResponse:
    """Run the screening pipeline for the requested categories."""
    request = screening.prepare(build_screening_request(body))
    result = await screening.run(request)

    summary: str | None = None
    if body.summarize:
        if summarizer is None:
            logger.info("Summary requested but summarization is unavailable")
        else:
            summary = await summarizer.summarize(request, result)

    return build_search_response(result, summary)

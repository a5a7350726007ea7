"""Mapping between the search API schemas and the screening models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from allergen_finder.schemas.search import (
    CategoryResultResponse,
    ExcludedListingResponse,
    ListingLinks,
    ListingResponse,
    SearchResponse,
)
from allergen_finder.services.screening.models import ScreeningRequest
from allergen_finder.services.screening.service import build_message


if TYPE_CHECKING:
    from allergen_finder.schemas.search import SearchRequest
    from allergen_finder.services.screening.models import (
        CategoryResult,
        ScreenedListing,
        ScreeningResult,
    )


def build_screening_request(body: SearchRequest) -> ScreeningRequest:
    """Build the screening request from the API body.

    Args:
        body: Validated search request body.

    Returns:
        ScreeningRequest; cleaning happens in the screening service.
    """
    return ScreeningRequest(
        allergens=tuple(body.allergens),
        categories=tuple(body.categories),
        rating_floor=body.rating_floor,
        purchase_sites=tuple(body.purchase_sites),
        price_min=body.price_min,
        price_max=body.price_max,
        location=body.location,
    )


def _listing_response(listing: ScreenedListing) -> ListingResponse:
    return ListingResponse(
        name=listing.name,
        price=listing.price,
        rating=listing.rating,
        review_count=listing.review_count,
        brand=listing.brand,
        source=listing.source,
        source_host=listing.source_host,
        links=ListingLinks(
            primary=listing.primary_link,
            manufacturer=listing.manufacturer_link,
        ),
        image=listing.resolved_image,
        safety_verdict=listing.safety_verdict,
        ingredients_checked=listing.ingredients_checked,
        priority=listing.priority_score,
    )


def _category_response(result: CategoryResult) -> CategoryResultResponse:
    return CategoryResultResponse(
        category=result.category,
        status=result.status,
        items=[_listing_response(item) for item in result.items],
        excluded=[
            ExcludedListingResponse(
                name=item.name,
                link=item.primary_link,
                verdict=item.verdict,
                matched_term=item.matched_term,
            )
            for item in result.excluded
        ],
        error=result.error,
    )


def build_search_response(
    result: ScreeningResult,
    summary: str | None = None,
) -> SearchResponse:
    """Build the API response for a screening result.

    Args:
        result: Screening result.
        summary: Optional language-model summary.

    Returns:
        SearchResponse carrying the disclaimer in its message.
    """
    return SearchResponse(
        ok=True,
        results=[_category_response(category) for category in result.results],
        allergens=list(result.allergens),
        complete=result.complete,
        message=build_message(result.allergens),
        summary=summary,
    )

"""Search endpoint schemas.

Request fields accept both camelCase and snake_case; responses are always
camelCase.
"""

from __future__ import annotations

from pydantic import Field

from allergen_finder.schemas.base import APIRequest, APIResponse
from allergen_finder.schemas.enums import CategoryStatus, SafetyVerdict


class SearchRequest(APIRequest):
    """Allergen-screened product search request."""

    allergens: list[str] = Field(
        default_factory=list,
        description="Allergen names to screen against",
        examples=[["Benzophenone-3", "Fragrance Mix 1"]],
    )
    categories: list[str] = Field(
        default_factory=list,
        description="Product categories to search",
        examples=[["sunscreen", "moisturizer"]],
    )
    rating_floor: float | None = Field(
        default=None,
        ge=0,
        le=5,
        description="Minimum average rating (service default 4.0)",
    )
    purchase_sites: list[str] = Field(
        default_factory=list,
        description="Preferred retailer hosts, ranked first",
        examples=[["ulta.com"]],
    )
    price_min: float | None = Field(default=None, ge=0, description="Lower price bound")
    price_max: float | None = Field(default=None, ge=0, description="Upper price bound")
    location: str | None = Field(
        default=None,
        max_length=200,
        description="Free-text location used to bias search results",
    )
    summarize: bool = Field(
        default=False,
        description="Ask the language model for a prose summary",
    )


class ListingLinks(APIResponse):
    """Purchase links for a listing."""

    primary: str = Field(..., description="Product page URL")
    manufacturer: str | None = Field(
        default=None,
        description="Primary link when it is the brand's own site",
    )


class ListingResponse(APIResponse):
    """A screened product listing."""

    name: str
    price: float | None = None
    rating: float | None = None
    review_count: int | None = None
    brand: str | None = None
    source: str | None = None
    source_host: str
    links: ListingLinks
    image: str | None = Field(default=None, description="Display image URL")
    safety_verdict: SafetyVerdict
    ingredients_checked: bool = Field(
        ...,
        description="False when no ingredient list could be found to screen",
    )
    priority: int = Field(..., description="1 for preferred retailers, else 0")


class ExcludedListingResponse(APIResponse):
    """A candidate rejected for an allergen or watchlist hit."""

    name: str
    link: str
    verdict: SafetyVerdict
    matched_term: str | None = None


class CategoryResultResponse(APIResponse):
    """Screening result for one category."""

    category: str
    status: CategoryStatus
    items: list[ListingResponse] = Field(default_factory=list)
    excluded: list[ExcludedListingResponse] = Field(default_factory=list)
    error: str | None = None


class SearchResponse(APIResponse):
    """Screened shortlist across all requested categories."""

    ok: bool = True
    results: list[CategoryResultResponse] = Field(default_factory=list)
    allergens: list[str] = Field(
        default_factory=list,
        description="Expanded terms the listings were screened against",
    )
    complete: bool = Field(
        default=True,
        description="False if the request deadline cut the run short",
    )
    message: str
    summary: str | None = Field(
        default=None,
        description="Optional language-model summary of the shortlist",
    )


class ErrorResponse(APIResponse):
    """Structured error payload."""

    ok: bool = False
    error: str = Field(..., description="Error category tag")
    detail: str = Field(..., description="Diagnostic detail")
    request_id: str | None = None

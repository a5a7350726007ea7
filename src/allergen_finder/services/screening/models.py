"""Data models for the screening pipeline.

Listings are immutable: the mapper produces a CandidateListing once per
raw search record, screening turns a survivor into a ScreenedListing, and
image enrichment produces a new ScreenedListing via ``model_copy``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from allergen_finder.schemas.enums import CategoryStatus, SafetyVerdict


class CandidateListing(BaseModel):
    """A shopping listing as returned by the search index, normalized."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Product title")
    price: float | None = Field(None, ge=0, description="Extracted price")
    rating: float | None = Field(None, ge=0, le=5, description="Star rating")
    review_count: int | None = Field(None, ge=0, description="Number of reviews")
    primary_link: str = Field(..., description="Product page URL")
    brand: str | None = Field(None, description="Brand name, if reported")
    source_host: str = Field(..., description="Host of the primary link")
    source: str | None = Field(None, description="Retailer label from the index")
    thumbnail: str | None = Field(None, description="Image URL from the index")


class ScreenedListing(CandidateListing):
    """A candidate that went through ingredient screening."""

    safety_verdict: SafetyVerdict = SafetyVerdict.SAFE
    matched_term: str | None = None
    priority_score: int = 0
    resolved_image: str | None = None
    ingredients_checked: bool = Field(
        default=False,
        description="True if ingredient text was found; False means not screenable",
    )
    manufacturer_link: str | None = None


class ExcludedListing(BaseModel):
    """Provenance for a candidate rejected because of an allergen hit."""

    model_config = ConfigDict(frozen=True)

    name: str
    primary_link: str
    verdict: SafetyVerdict
    matched_term: str | None = None


class CategoryResult(BaseModel):
    """Screening outcome for a single category."""

    model_config = ConfigDict(frozen=True)

    category: str
    status: CategoryStatus = CategoryStatus.OK
    items: tuple[ScreenedListing, ...] = ()
    excluded: tuple[ExcludedListing, ...] = ()
    error: str | None = None


class ScreeningRequest(BaseModel):
    """Validated, cleaned input for one screening run."""

    model_config = ConfigDict(frozen=True)

    allergens: tuple[str, ...]
    categories: tuple[str, ...]
    rating_floor: float | None = Field(default=None, ge=0, le=5)
    purchase_sites: tuple[str, ...] = ()
    price_min: float | None = Field(None, ge=0)
    price_max: float | None = Field(None, ge=0)
    location: str | None = None

    @property
    def has_price_bounds(self) -> bool:
        """Whether the caller set any price bound."""
        return self.price_min is not None or self.price_max is not None


class ScreeningResult(BaseModel):
    """Outcome of a full screening run across all requested categories."""

    model_config = ConfigDict(frozen=True)

    results: tuple[CategoryResult, ...] = ()
    allergens: tuple[str, ...] = ()
    complete: bool = True

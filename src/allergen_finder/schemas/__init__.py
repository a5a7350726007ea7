"""Pydantic schemas for request/response validation."""

from allergen_finder.schemas.base import APIRequest, APIResponse
from allergen_finder.schemas.enums import CategoryStatus, HealthStatus, SafetyVerdict
from allergen_finder.schemas.health import HealthResponse, ReadinessResponse
from allergen_finder.schemas.search import (
    CategoryResultResponse,
    ErrorResponse,
    ExcludedListingResponse,
    ListingLinks,
    ListingResponse,
    SearchRequest,
    SearchResponse,
)


__all__ = [
    "APIRequest",
    "APIResponse",
    "CategoryResultResponse",
    "CategoryStatus",
    "ErrorResponse",
    "ExcludedListingResponse",
    "HealthResponse",
    "HealthStatus",
    "ListingLinks",
    "ListingResponse",
    "ReadinessResponse",
    "SafetyVerdict",
    "SearchRequest",
    "SearchResponse",
]

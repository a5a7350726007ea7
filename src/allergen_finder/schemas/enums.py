"""Enumeration types for allergen finder schemas.

This module contains all enum definitions used across the API schemas
and the screening pipeline.
"""

from __future__ import annotations

from enum import StrEnum


class SafetyVerdict(StrEnum):
    """Outcome of screening one listing against the allergen set.

    SAFE means "not found to contain" - a best-effort absence of evidence,
    never a certification.
    """

    SAFE = "safe"
    UNSAFE_ALLERGEN_FOUND = "unsafe-allergen-found"
    UNSAFE_WATCHLIST = "unsafe-watchlist"


class CategoryStatus(StrEnum):
    """Whether a category's candidate search could be carried out."""

    OK = "ok"
    SEARCH_FAILED = "search_failed"


class HealthStatus(StrEnum):
    """Service health status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"

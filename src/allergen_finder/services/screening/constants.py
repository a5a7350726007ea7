"""Screening pipeline constants."""

from __future__ import annotations

from typing import Final


DISCLAIMER: Final[str] = (
    "Results are screened from publicly listed ingredients on a best-effort "
    "basis. \"Not found to contain\" is not a guarantee that a product is "
    "free of an allergen; always check the label and consult your "
    "dermatologist or allergist."
)

SEARCH_FAILED_DETAIL: Final[str] = "Search failed"

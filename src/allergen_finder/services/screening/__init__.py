"""Allergen screening pipeline.

The orchestrator lives in ``allergen_finder.services.screening.service``;
this package exports the models and exceptions shared with the clients.
"""

from allergen_finder.services.screening.exceptions import (
    ConfigurationError,
    MalformedInputError,
    ScreeningError,
    UpstreamUnavailableError,
)
from allergen_finder.services.screening.models import (
    CandidateListing,
    CategoryResult,
    ExcludedListing,
    ScreenedListing,
    ScreeningRequest,
    ScreeningResult,
)


__all__ = [
    "CandidateListing",
    "CategoryResult",
    "ConfigurationError",
    "ExcludedListing",
    "MalformedInputError",
    "ScreenedListing",
    "ScreeningError",
    "ScreeningRequest",
    "ScreeningResult",
    "UpstreamUnavailableError",
]

"""Static allergen tables.

Two relations are kept apart:
- SAME_SUBSTANCE_SYNONYMS: other names (INCI, abbreviations, trade names) for
  the very same substance. A hit is reported as the allergen itself.
- CROSS_REACTOR_FAMILIES: chemically or clinically related ingredients that
  sensitized users are commonly told to avoid. A hit is a watchlist hit.

Keys and values are already normalized (lowercase, single spaces).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final


if TYPE_CHECKING:
    from collections.abc import Mapping


# Allergens offered to users in the search form
KNOWN_ALLERGENS: Final[tuple[str, ...]] = (
    "Amidoamine",
    "Propolis",
    "Benzophenone-3",
    "Oxybenzone",
    "Sorbitan sesquioleate",
    "Fragrance Mix 1",
    "Fragrance Mix 2",
    "Amerchol",
)

_FRAGRANCE_NAMES: Final[tuple[str, ...]] = ("fragrance", "parfum", "perfume")

SAME_SUBSTANCE_SYNONYMS: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "amidoamine": (
            "stearamidopropyl dimethylamine",
            "amidopropyl",
            "apd",
            "sapdm",
        ),
        "propolis": (
            "propolis extract",
            "bee glue",
            "cera propolis",
            "bee resin",
            "bee propolis",
        ),
        "benzophenone-3": ("oxybenzone", "bp-3", "bp3", "benzophenone 3"),
        "oxybenzone": ("benzophenone-3",),
        "benzophenone-4": ("bp-4", "bp4", "benzophenone 4", "sulisobenzone"),
        "sulisobenzone": ("benzophenone-4",),
        "sorbitan sesquioleate": (
            "sso",
            "sorbitan sesqui oleate",
            "sorbitan sesqui-oleate",
        ),
        "fragrance mix 1": _FRAGRANCE_NAMES,
        "fragrance mix 2": _FRAGRANCE_NAMES,
        "amerchol": ("lanolin alcohol", "lanolin"),
    }
)

CROSS_REACTOR_FAMILIES: Final[Mapping[str, tuple[str, ...]]] = MappingProxyType(
    {
        "benzophenone-3": ("benzophenone-4", "benzophenone-1", "benzophenone-2"),
        "oxybenzone": ("benzophenone-4", "benzophenone-1", "benzophenone-2"),
        "fragrance mix 1": ("essential oil",),
        "fragrance mix 2": ("essential oil",),
        "amidoamine": ("cocamidopropyl betaine", "capb"),
        "amerchol": ("cholesterol",),
        "sorbitan sesquioleate": ("sorbitan", "polysorbate"),
    }
)

"""Allergen expansion and matching."""

from allergen_finder.services.allergen.constants import KNOWN_ALLERGENS
from allergen_finder.services.allergen.expander import (
    AllergenSet,
    expand_allergens,
    normalize_term,
)
from allergen_finder.services.allergen.matcher import (
    AllergenMatch,
    contains_allergen,
    match_allergens,
)


__all__ = [
    "KNOWN_ALLERGENS",
    "AllergenMatch",
    "AllergenSet",
    "contains_allergen",
    "expand_allergens",
    "match_allergens",
    "normalize_term",
]

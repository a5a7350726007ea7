"""Allergen matching against extracted ingredient text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from allergen_finder.schemas.enums import SafetyVerdict
from allergen_finder.services.allergen.expander import normalize_term


if TYPE_CHECKING:
    from allergen_finder.services.allergen.expander import AllergenSet


@dataclass(frozen=True, slots=True)
class AllergenMatch:
    """Result of matching one ingredient text against an AllergenSet."""

    verdict: SafetyVerdict
    term: str | None = None

    @property
    def found(self) -> bool:
        """True when any allergen or watchlist term was found."""
        return self.verdict is not SafetyVerdict.SAFE


NO_MATCH = AllergenMatch(verdict=SafetyVerdict.SAFE)


def match_allergens(text: str | None, allergens: AllergenSet) -> AllergenMatch:
    """Find the first allergen term contained in the text.

    Declared terms are checked before watchlist terms, so a page listing
    both the allergen and a cross-reactor is reported as the allergen.
    Empty text never matches: no evidence is not evidence of absence, but
    it is not evidence of presence either.

    Args:
        text: Extracted ingredient text; normalized again here.
        allergens: Expanded allergen set.

    Returns:
        AllergenMatch with the verdict and the matched term, if any.
    """
    haystack = normalize_term(text)
    if not haystack:
        return NO_MATCH

    for term in allergens.declared:
        if term in haystack:
            return AllergenMatch(SafetyVerdict.UNSAFE_ALLERGEN_FOUND, term)

    for term in allergens.watchlist_terms:
        if term in haystack:
            return AllergenMatch(SafetyVerdict.UNSAFE_WATCHLIST, term)

    return NO_MATCH


def contains_allergen(text: str | None, allergens: AllergenSet) -> bool:
    """Return True if the text contains any term of the set."""
    return match_allergens(text, allergens).found

"""Unit tests for allergen matching."""

from __future__ import annotations

import pytest

from allergen_finder.schemas.enums import SafetyVerdict
from allergen_finder.services.allergen import (
    contains_allergen,
    expand_allergens,
    match_allergens,
)


pytestmark = pytest.mark.unit


class TestMatchAllergens:
    """Tests for match_allergens."""

    def test_empty_text_never_matches(self) -> None:
        """Should report no match for empty or missing text."""
        allergens = expand_allergens(["Oxybenzone"])

        assert match_allergens("", allergens).found is False
        assert match_allergens(None, allergens).found is False
        assert match_allergens("   ", allergens).verdict == SafetyVerdict.SAFE

    def test_declared_term_found(self) -> None:
        """Should report the allergen itself when a declared term occurs."""
        allergens = expand_allergens(["Benzophenone-3"])

        match = match_allergens(
            "Active: Avobenzone 3%, Oxybenzone 6%. Inactive: water", allergens
        )

        assert match.verdict == SafetyVerdict.UNSAFE_ALLERGEN_FOUND
        assert match.term in {"benzophenone-3", "oxybenzone"}

    def test_watchlist_term_found(self) -> None:
        """Should report a watchlist hit for a cross-reactor only."""
        allergens = expand_allergens(["Amerchol"])

        match = match_allergens("water, glycerin, cholesterol, squalane", allergens)

        assert match.verdict == SafetyVerdict.UNSAFE_WATCHLIST
        assert match.term == "cholesterol"

    def test_declared_takes_precedence_over_watchlist(self) -> None:
        """Should prefer the declared verdict when both kinds occur."""
        allergens = expand_allergens(["Fragrance Mix 1"])

        match = match_allergens("lavender essential oil, parfum", allergens)

        assert match.verdict == SafetyVerdict.UNSAFE_ALLERGEN_FOUND
        assert match.term == "parfum"

    def test_matching_is_case_insensitive(self) -> None:
        """Should normalize the text before matching."""
        allergens = expand_allergens(["propolis"])

        assert match_allergens("Contains  PROPOLIS   Extract", allergens).found

    def test_clean_text_is_safe(self) -> None:
        """Should return SAFE when no term occurs."""
        allergens = expand_allergens(["Amerchol"])

        match = match_allergens("zinc oxide, caprylic triglyceride", allergens)

        assert match.verdict == SafetyVerdict.SAFE
        assert match.term is None


class TestContainsAllergen:
    """Tests for contains_allergen."""

    def test_true_on_any_hit(self) -> None:
        """Should be True for declared and watchlist hits."""
        allergens = expand_allergens(["Amerchol"])

        assert contains_allergen("lanolin alcohol", allergens) is True
        assert contains_allergen("cholesterol", allergens) is True
        assert contains_allergen("glycerin", allergens) is False

"""Unit tests for the ingredient extraction strategies."""

from __future__ import annotations

import pytest

from allergen_finder.services.extraction.strategies import (
    extract_ingredient_text,
    from_keyword_windows,
    from_meta_tags,
    from_retailer_json,
    from_structured_data,
    iter_meta_tags,
    select_best_candidate,
)


pytestmark = pytest.mark.unit


JSONLD_PAGE = """
<html><head>
<script type="application/ld+json">
{"@context": "https://schema.org", "@graph": [
  {"@type": "Organization", "name": "Acme"},
  {"@type": "Product", "name": "Daily Lotion",
   "offers": {"price": "12.00"},
   "ingredients": "Water, Glycerin, Cetearyl Alcohol, Zinc Oxide"}
]}
</script>
</head><body>Buy now</body></html>
"""


class TestFromStructuredData:
    """Tests for the JSON-LD strategy."""

    def test_finds_nested_ingredients(self) -> None:
        """Should find ingredients nested inside @graph."""
        assert from_structured_data(JSONLD_PAGE) == [
            "Water, Glycerin, Cetearyl Alcohol, Zinc Oxide"
        ]

    def test_skips_invalid_json(self) -> None:
        """Should ignore blocks that fail to parse."""
        html = (
            '<script type="application/ld+json">{"ingredients": "water",</script>'
            + JSONLD_PAGE
        )

        assert from_structured_data(html) == [
            "Water, Glycerin, Cetearyl Alcohol, Zinc Oxide"
        ]

    def test_ignores_non_string_ingredients(self) -> None:
        """Should only collect string values."""
        html = (
            '<script type="application/ld+json">'
            '{"ingredients": ["water", "glycerin"]}</script>'
        )

        assert from_structured_data(html) == []


class TestFromRetailerJson:
    """Tests for the inline retailer state strategy."""

    def test_matches_known_keys(self) -> None:
        """Should pull values for the known retailer keys."""
        html = (
            '<script>window.__STATE__ = {"product": {"ingredient_desc": '
            '"Aqua, Titanium Dioxide, Squalane"}, "broken": </script>'
        )

        assert from_retailer_json(html) == ["Aqua, Titanium Dioxide, Squalane"]

    def test_ignores_short_values(self) -> None:
        """Should skip values shorter than ten characters."""
        assert from_retailer_json('{"ingredients": "water"}') == []


class TestMetaTags:
    """Tests for the meta tag helpers."""

    def test_iter_meta_tags_any_attribute_order(self) -> None:
        """Should read attributes regardless of their order."""
        html = "<meta content='A picture' property=\"og:title\">"

        assert list(iter_meta_tags(html)) == [
            {"content": "A picture", "property": "og:title"}
        ]

    def test_from_meta_tags(self) -> None:
        """Should collect ingredient meta content."""
        html = (
            '<meta name="description" content="The best lotion ever made">'
            '<meta property="product:ingredients" '
            'content="Water, Shea Butter, Tocopherol">'
        )

        assert from_meta_tags(html) == ["Water, Shea Butter, Tocopherol"]

    def test_from_meta_tags_angle_bracket_in_content(self) -> None:
        """Should keep a quoted content value that contains a ">"."""
        html = (
            '<meta name="ingredients" '
            'content="Water, Glycerin, Oxybenzone > 1%, Parfum">'
        )

        assert from_meta_tags(html) == ["Water, Glycerin, Oxybenzone > 1%, Parfum"]

    def test_iter_meta_tags_unquoted_values(self) -> None:
        """Should read unquoted attribute values."""
        html = "<meta property=og:image content=https://cdn.example/p.jpg>"

        assert list(iter_meta_tags(html)) == [
            {"property": "og:image", "content": "https://cdn.example/p.jpg"}
        ]


class TestFromKeywordWindows:
    """Tests for the keyword window strategy."""

    def test_window_around_keyword(self) -> None:
        """Should strip markup from the text around the keyword."""
        html = (
            "<div><h2>Ingredients</h2><p>Water, Zinc Oxide, Caprylic/Capric "
            "Triglyceride, Jojoba Esters</p></div>"
        )

        windows = from_keyword_windows(html)

        assert windows
        assert "zinc oxide" in windows[0]
        assert "<p>" not in windows[0]

    def test_short_windows_are_dropped(self) -> None:
        """Should drop windows with too little text."""
        assert from_keyword_windows("<b>INCI</b>") == []


class TestSelectBestCandidate:
    """Tests for the reducer."""

    def test_longest_wins(self) -> None:
        """Should pick the longest candidate."""
        assert select_best_candidate(["water", "water, glycerin"]) == "water, glycerin"

    def test_first_wins_ties(self) -> None:
        """Should keep the first candidate on equal length."""
        assert select_best_candidate(["aaaa", "bbbb"]) == "aaaa"

    def test_decodes_entities_and_nbsp(self) -> None:
        """Should unescape entities and normalize whitespace."""
        assert (
            select_best_candidate(["Water&nbsp;&amp;  Aloe Vera"])
            == "water & aloe vera"
        )

    def test_empty_pool(self) -> None:
        """Should return an empty string when there are no candidates."""
        assert select_best_candidate([]) == ""


class TestExtractIngredientText:
    """Tests for the full cascade."""

    def test_empty_document(self) -> None:
        """Should return an empty string for empty input."""
        assert extract_ingredient_text("") == ""
        assert extract_ingredient_text(None) == ""

    def test_unrelated_page_yields_nothing(self) -> None:
        """Should find no evidence on a page without ingredient content."""
        assert extract_ingredient_text("<html><body>Hello</body></html>") == ""

    def test_structured_data_result_is_normalized(self) -> None:
        """Should return lowercase text with single spaces."""
        text = extract_ingredient_text(JSONLD_PAGE)

        assert "water, glycerin, cetearyl alcohol, zinc oxide" in text
        assert text == text.lower()

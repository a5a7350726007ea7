"""Unit tests for shopping record mapping."""

from __future__ import annotations

import pytest

from allergen_finder.mappers import host_of, map_shopping_result, map_shopping_results
from tests.factories.listings import make_record


pytestmark = pytest.mark.unit


class TestHostOf:
    """Tests for host_of."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://www.Ulta.com/p/1", "ulta.com"),
            ("http://shop.example.com:8080/x", "shop.example.com"),
            ("not a url", ""),
            ("", ""),
            (None, ""),
        ],
    )
    def test_host_of(self, url: str | None, expected: str) -> None:
        """Should return the lowercase host without www."""
        assert host_of(url) == expected


class TestMapShoppingResult:
    """Tests for map_shopping_result."""

    def test_maps_full_record(self) -> None:
        """Should map every field of a complete record."""
        listing = map_shopping_result(make_record(brand="Acme"))

        assert listing is not None
        assert listing.name == "Mineral Sunscreen SPF 30"
        assert listing.price == 18.0
        assert listing.rating == 4.6
        assert listing.review_count == 120
        assert listing.primary_link == "https://www.ulta.com/p/mineral-sunscreen"
        assert listing.source_host == "ulta.com"
        assert listing.source == "Ulta Beauty"
        assert listing.brand == "Acme"
        assert listing.thumbnail is not None

    def test_falls_back_to_link_field(self) -> None:
        """Should use link when product_link is missing."""
        record = make_record(product_link=None, link="https://target.com/p/2")

        listing = map_shopping_result(record)

        assert listing is not None
        assert listing.primary_link == "https://target.com/p/2"

    def test_parses_price_string(self) -> None:
        """Should parse the display price when no extracted price exists."""
        record = make_record(extracted_price=None, price="$1,299.50")

        listing = map_shopping_result(record)

        assert listing is not None
        assert listing.price == 1299.5

    def test_zero_rating_is_missing(self) -> None:
        """Should treat a zero rating as not rated."""
        listing = map_shopping_result(make_record(rating=0, reviews=None))

        assert listing is not None
        assert listing.rating is None
        assert listing.review_count is None

    @pytest.mark.parametrize(
        ("reviews", "expected"),
        [
            ("1.2K", 1200),
            ("4.1k reviews", 4100),
            ("2M", 2_000_000),
            ("1,234 reviews", 1234),
            (87, 87),
        ],
    )
    def test_review_count_abbreviations(self, reviews: object, expected: int) -> None:
        """Should expand K and M abbreviations in review counts."""
        listing = map_shopping_result(make_record(reviews=reviews))

        assert listing is not None
        assert listing.review_count == expected

    def test_source_defaults_to_host(self) -> None:
        """Should use the link host when the record has no source label."""
        listing = map_shopping_result(make_record(source=""))

        assert listing is not None
        assert listing.source == "ulta.com"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"title": ""},
            {"product_link": None},
            {"product_link": "/relative/path"},
        ],
    )
    def test_unusable_records_are_skipped(self, overrides: dict[str, object]) -> None:
        """Should return None without a title or an absolute link."""
        assert map_shopping_result(make_record(**overrides)) is None


class TestMapShoppingResults:
    """Tests for map_shopping_results."""

    def test_skips_unusable_records(self) -> None:
        """Should keep index order and drop unusable records."""
        records = [
            make_record("A", "https://a.example/p"),
            make_record(title=""),
            make_record("B", "https://b.example/p"),
        ]

        assert [listing.name for listing in map_shopping_results(records)] == [
            "A",
            "B",
        ]

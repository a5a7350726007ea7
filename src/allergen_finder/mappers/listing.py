"""Mapping of raw shopping search records into CandidateListing."""

from __future__ import annotations

import re
from typing import Any, Final
from urllib.parse import urlsplit

from allergen_finder.services.screening.models import CandidateListing


_PRICE_PATTERN: Final = re.compile(r"(\d[\d,]*(?:\.\d+)?)")
_COUNT_PATTERN: Final = re.compile(r"(\d[\d,]*(?:\.\d+)?)\s*([km])?\b", re.IGNORECASE)
_COUNT_SUFFIXES: Final[dict[str, int]] = {"k": 1_000, "m": 1_000_000}


def host_of(url: str | None) -> str:
    """Return the lowercase host of a URL without a leading ``www.``.

    Returns "" for anything that does not parse to a host.
    """
    if not url:
        return ""
    try:
        host = urlsplit(url.strip()).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    return host.removeprefix("www.")


def _clean(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    match = _PRICE_PATTERN.search(str(value))
    if match is None:
        return None
    try:
        return float(match.group(1).replace(",", ""))
    except ValueError:
        return None


def _parse_rating(value: Any) -> float | None:
    rating = _to_float(value)
    # A zero rating means "not rated" in the index
    if rating is None or rating <= 0 or rating > 5:
        return None
    return rating


def _parse_reviews(value: Any) -> int | None:
    """Parse a review count; "1.2K" style abbreviations are expanded."""
    if isinstance(value, str):
        match = _COUNT_PATTERN.search(value)
        if match is None:
            return None
        number, suffix = match.groups()
        scale = _COUNT_SUFFIXES.get((suffix or "").lower(), 1)
        reviews: float | None = float(number.replace(",", "")) * scale
    else:
        reviews = _to_float(value)
    if reviews is None or reviews <= 0:
        return None
    return round(reviews)


def _parse_price(record: dict[str, Any]) -> float | None:
    price = _to_float(record.get("extracted_price"))
    if price is None:
        price = _to_float(record.get("price"))
    if price is None or price < 0:
        return None
    return price


def map_shopping_result(record: dict[str, Any]) -> CandidateListing | None:
    """Map one raw shopping record to a CandidateListing.

    Args:
        record: A single entry of the search index's shopping results.

    Returns:
        The listing, or None when the record has no usable link or title.
    """
    link = _clean(record.get("product_link") or record.get("link"))
    name = _clean(record.get("title"))
    host = host_of(link)
    if not link or not name or not host:
        return None

    thumbnail = _clean(record.get("thumbnail") or record.get("serpapi_thumbnail"))

    return CandidateListing(
        name=name,
        price=_parse_price(record),
        rating=_parse_rating(record.get("rating")),
        review_count=_parse_reviews(record.get("reviews")),
        primary_link=link,
        brand=_clean(record.get("brand")) or None,
        source_host=host,
        source=_clean(record.get("source")) or host,
        thumbnail=thumbnail or None,
    )


def map_shopping_results(records: list[dict[str, Any]]) -> list[CandidateListing]:
    """Map raw records, skipping the ones without a link or title."""
    listings = (map_shopping_result(record) for record in records)
    return [listing for listing in listings if listing is not None]

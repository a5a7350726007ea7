"""Pure filtering, deduplication and ranking helpers for the orchestrator."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from allergen_finder.mappers.listing import host_of


if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from allergen_finder.services.screening.models import (
        CandidateListing,
        ScreenedListing,
    )


def passes_rating(
    listing: CandidateListing,
    floor: float,
    *,
    unknown_passes: bool = True,
) -> bool:
    """Rating at or above the floor passes; missing rating passes by default."""
    if listing.rating is None:
        return unknown_passes
    return listing.rating >= floor


def passes_price(
    listing: CandidateListing,
    price_min: float | None,
    price_max: float | None,
) -> bool:
    """Check the price bounds (inclusive).

    With no bound set everything passes. With any bound set a listing
    without a price fails, since it cannot be verified.
    """
    if price_min is None and price_max is None:
        return True
    if listing.price is None:
        return False
    if price_min is not None and listing.price < price_min:
        return False
    return not (price_max is not None and listing.price > price_max)


def normalize_site(site: str) -> str:
    """Lowercase a preferred-site entry and strip scheme, ``www.`` and path."""
    site = site.strip().lower()
    if "://" in site:
        site = urlsplit(site).netloc or site
    site = site.removeprefix("www.")
    return site.split("/", 1)[0]


def is_preferred_host(host: str, preferred_sites: Iterable[str]) -> bool:
    """Whether any preferred site appears in the host (substring match)."""
    host = host.lower()
    for site in preferred_sites:
        needle = normalize_site(site)
        if needle and needle in host:
            return True
    return False


def manufacturer_link(listing: CandidateListing) -> str | None:
    """Return the primary link when it points at the brand's own site.

    The brand (lowercase, spaces removed) has to appear in the link host.
    """
    if not listing.brand:
        return None
    brand = "".join(listing.brand.lower().split())
    if brand and brand in listing.source_host:
        return listing.primary_link
    return None


def link_key(url: str) -> str:
    """Dedup key for a link: scheme, ``www.``, fragment and trailing slash ignored."""
    parts = urlsplit(url.strip())
    host = host_of(url)
    path = parts.path.rstrip("/")
    key = f"{host}{path}"
    if parts.query:
        key = f"{key}?{parts.query}"
    return key


def dedupe_listings(listings: Iterable[CandidateListing]) -> list[CandidateListing]:
    """Drop listings whose link was already seen; the first occurrence wins."""
    seen: set[str] = set()
    unique: list[CandidateListing] = []
    for listing in listings:
        key = link_key(listing.primary_link)
        if key in seen:
            continue
        seen.add(key)
        unique.append(listing)
    return unique


def rank_listings(listings: Sequence[ScreenedListing]) -> list[ScreenedListing]:
    """Sort by priority, then rating, both descending.

    Missing ratings sort as 0. The sort is stable, so equal listings keep
    the search index order.
    """
    return sorted(
        listings,
        key=lambda item: (-item.priority_score, -(item.rating or 0.0)),
    )

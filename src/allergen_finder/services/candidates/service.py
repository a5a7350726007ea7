"""Candidate source: shopping search with best-effort location bias."""

from __future__ import annotations

from typing import TYPE_CHECKING

from allergen_finder.mappers.listing import map_shopping_results
from allergen_finder.observability.logging import get_logger
from allergen_finder.services.screening.exceptions import UpstreamUnavailableError


if TYPE_CHECKING:
    from allergen_finder.clients.serpapi import SerpApiClient
    from allergen_finder.services.screening.models import CandidateListing


logger = get_logger(__name__)


class CandidateSource:
    """Turns a query into normalized CandidateListings.

    Location bias never fails a search on its own: if the location cannot
    be canonicalized, or the search rejects it, the same query is retried
    once without it.
    """

    def __init__(
        self,
        client: SerpApiClient,
        *,
        location_bias_enabled: bool = True,
    ) -> None:
        """Initialize the source.

        Args:
            client: Initialized SerpAPI client.
            location_bias_enabled: Whether location strings are used at all.
        """
        self._client = client
        self._location_bias_enabled = location_bias_enabled

    @property
    def configured(self) -> bool:
        """Whether the underlying search client has its credential."""
        return self._client.configured

    async def resolve_location(self, location: str | None) -> str | None:
        """Canonicalize a free-text location, or None if unusable."""
        if not self._location_bias_enabled or not location or not location.strip():
            return None
        return await self._client.canonicalize_location(location)

    async def search(
        self,
        query: str,
        location: str | None = None,
    ) -> list[CandidateListing]:
        """Search the shopping index.

        Args:
            query: Free-text query.
            location: Canonical location name (see ``resolve_location``).

        Returns:
            Listings in index order.

        Raises:
            ConfigurationError: If the search credential is missing.
            UpstreamUnavailableError: If the search fails, with and without
                location bias.
        """
        if location and self._location_bias_enabled:
            try:
                records = await self._client.search_shopping(query, location)
            except UpstreamUnavailableError as e:
                logger.info(
                    "Search with location bias failed, retrying without it",
                    query=query,
                    location=location,
                    error=str(e),
                )
            else:
                return map_shopping_results(records)

        records = await self._client.search_shopping(query)
        return map_shopping_results(records)

"""SerpAPI client for Google Shopping search and location lookup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Final

import httpx

from allergen_finder.core.config import get_settings
from allergen_finder.observability.logging import get_logger
from allergen_finder.services.screening.exceptions import (
    ConfigurationError,
    UpstreamUnavailableError,
)


if TYPE_CHECKING:
    from allergen_finder.core.config import Settings


logger = get_logger(__name__)

RESULT_KEYS: Final[tuple[str, ...]] = ("shopping_results", "inline_shopping_results")


class SerpApiClient:
    """Client for the SerpAPI search and locations endpoints.

    Search failures are raised as UpstreamUnavailableError so the caller
    can decide between the fallback query and a failed category. Location
    lookup is best-effort and never raises.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Application settings (defaults to the cached settings).
            http_client: HTTP client for API requests.
        """
        self._settings = settings or get_settings()
        self._http = http_client
        self._owns_http_client = http_client is None

    @property
    def configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self._settings.SERPAPI_API_KEY)

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._settings.serpapi.timeout),
            )
        logger.info("SerpApiClient initialized", configured=self.configured)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.info("SerpApiClient shutdown")

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            msg = "Client not initialized. Call initialize() first."
            raise RuntimeError(msg)
        return self._http

    async def search_shopping(
        self,
        query: str,
        location: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a Google Shopping query.

        Args:
            query: Free-text search query.
            location: Canonical SerpAPI location name used as a bias.

        Returns:
            Raw shopping result records, possibly empty.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamUnavailableError: On timeout, transport error or a
                non-success status.
        """
        if not self.configured:
            msg = "Missing SERPAPI_API_KEY"
            raise ConfigurationError(msg)

        serp = self._settings.serpapi
        params: dict[str, str | int] = {
            "engine": serp.engine,
            "q": query,
            "gl": serp.gl,
            "hl": serp.hl,
            "num": serp.num,
            "api_key": self._settings.SERPAPI_API_KEY,
        }
        if location:
            params["location"] = location

        try:
            response = await self._client().get(
                serp.base_url,
                params=params,
                timeout=serp.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("Shopping search timed out", query=query)
            msg = f"SerpAPI timed out after {serp.timeout}s"
            raise UpstreamUnavailableError(msg) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Shopping search failed", query=query, status_code=status)
            msg = f"SerpAPI {status}"
            raise UpstreamUnavailableError(msg) from e
        except httpx.HTTPError as e:
            logger.warning("Shopping search request error", query=query, error=str(e))
            msg = f"SerpAPI request failed: {e}"
            raise UpstreamUnavailableError(msg) from e
        except ValueError as e:
            msg = "SerpAPI returned an undecodable body"
            raise UpstreamUnavailableError(msg) from e

        if not isinstance(data, dict):
            return []

        results: list[dict[str, Any]] = []
        for key in RESULT_KEYS:
            records = data.get(key)
            if isinstance(records, list):
                results.extend(r for r in records if isinstance(r, dict))

        if not results and data.get("error"):
            # SerpAPI reports "no results" as a 200 with an error string
            logger.debug("Shopping search empty", query=query, reason=data["error"])

        logger.debug(
            "Shopping search completed",
            query=query,
            location=location,
            count=len(results),
        )
        return results

    async def canonicalize_location(self, text: str) -> str | None:
        """Resolve a free-text location to SerpAPI's canonical name.

        Args:
            text: User supplied location, e.g. "austin tx".

        Returns:
            The canonical location name, or None when the lookup fails or
            finds nothing.
        """
        text = text.strip()
        if not text or self._http is None:
            return None

        serp = self._settings.serpapi
        try:
            response = await self._http.get(
                serp.locations_url,
                params={"q": text, "limit": 1},
                timeout=serp.location_timeout,
            )
            response.raise_for_status()
            data = response.json()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Location lookup failed", location=text, error=str(e))
            return None

        if isinstance(data, list) and data and isinstance(data[0], dict):
            name = data[0].get("canonical_name")
            if isinstance(name, str) and name.strip():
                return name.strip()

        logger.debug("Location not recognised", location=text)
        return None

"""Ingredient extraction service.

Fetches a product page and runs the extraction cascade over it. Every
failure (timeout, transport error, non-2xx status, undecodable body)
degrades to an empty string, which the matcher treats as "no evidence".
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx

from allergen_finder.core.config import get_settings
from allergen_finder.observability.logging import get_logger
from allergen_finder.services.extraction.strategies import extract_ingredient_text


if TYPE_CHECKING:
    from allergen_finder.core.config import Settings


logger = get_logger(__name__)


class IngredientExtractor:
    """Fetches product pages and extracts their ingredient declaration.

    Example:
        ```python
        extractor = IngredientExtractor()
        await extractor.initialize()

        text = await extractor.fetch_ingredients("https://shop.example/p/1")

        await extractor.shutdown()
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            settings: Application settings (defaults to the cached settings).
            http_client: HTTP client for page fetches; created on initialize
                when not given.
        """
        self._settings = settings or get_settings()
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            fetch = self._settings.fetch
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(fetch.page_timeout),
                follow_redirects=True,
                headers={
                    "User-Agent": fetch.user_agent,
                    "Accept": (
                        "text/html,application/xhtml+xml,application/xml;"
                        "q=0.9,*/*;q=0.8"
                    ),
                    "Accept-Language": "en-US,en;q=0.5",
                },
            )
        logger.info("IngredientExtractor initialized")

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("IngredientExtractor shutdown")

    async def fetch_ingredients(self, url: str) -> str:
        """Fetch a product page and return its best-guess ingredient text.

        Args:
            url: Product page URL.

        Returns:
            Normalized ingredient text, or "" when nothing usable was found.
        """
        if self._http is None:
            logger.warning("HTTP client not initialized")
            return ""

        try:
            response = await self._http.get(url)
            response.raise_for_status()
            html = response.text[: self._settings.fetch.max_document_chars]
        except asyncio.CancelledError:
            raise
        except httpx.HTTPStatusError as e:
            logger.debug(
                "Product page returned error status",
                url=url,
                status_code=e.response.status_code,
            )
            return ""
        except Exception as e:
            logger.debug("Product page fetch failed", url=url, error=str(e))
            return ""

        try:
            text = extract_ingredient_text(html)
        except Exception as e:
            logger.warning("Ingredient extraction failed", url=url, error=str(e))
            return ""

        logger.debug("Extracted ingredient text", url=url, length=len(text))
        return text

"""Display image resolution for screened listings."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Final
from urllib.parse import urljoin, urlsplit

import httpx

from allergen_finder.core.config import get_settings
from allergen_finder.observability.logging import get_logger
from allergen_finder.services.extraction.strategies import iter_meta_tags


if TYPE_CHECKING:
    from allergen_finder.core.config import Settings
    from allergen_finder.services.images.cache import ImageCache
    from allergen_finder.services.screening.models import CandidateListing


logger = get_logger(__name__)

# Checked in order: Open Graph first, Twitter card as fallback
IMAGE_META_KEYS: Final[tuple[tuple[str, ...], ...]] = (
    ("og:image", "og:image:url", "og:image:secure_url"),
    ("twitter:image", "twitter:image:src"),
)


def to_https(url: str) -> str:
    """Upgrade an http:// URL to https://."""
    if url[:7].lower() == "http://":
        return "https://" + url[7:]
    return url


def _is_absolute_http(url: str | None) -> bool:
    if not url:
        return False
    parts = urlsplit(url.strip())
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def extract_page_image(html: str, page_url: str) -> str | None:
    """Find the page's preview image in its meta tags.

    Args:
        html: Page HTML.
        page_url: Final URL of the page, used to resolve relative paths.

    Returns:
        Absolute HTTPS image URL, or None when the page declares none.
    """
    tags = list(iter_meta_tags(html))
    for keys in IMAGE_META_KEYS:
        for attrs in tags:
            key = (attrs.get("property") or attrs.get("name") or "").lower()
            content = attrs.get("content", "").strip()
            if key in keys and content:
                resolved = urljoin(page_url, content)
                if _is_absolute_http(resolved):
                    return to_https(resolved)
    return None


class ImageResolver:
    """Resolves a display image per listing, with negative caching.

    Example:
        ```python
        resolver = ImageResolver(cache=ImageCache(500))
        await resolver.initialize()

        image = await resolver.resolve(listing)

        await resolver.shutdown()
        ```
    """

    def __init__(
        self,
        cache: ImageCache,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            cache: Shared image cache.
            settings: Application settings (defaults to the cached settings).
            http_client: HTTP client for page fetches.
        """
        self._cache = cache
        self._settings = settings or get_settings()
        self._http = http_client
        self._owns_http_client = http_client is None

    async def initialize(self) -> None:
        """Initialize the HTTP client if not provided."""
        if self._http is None:
            images = self._settings.images
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(images.timeout),
                follow_redirects=True,
                headers={"User-Agent": images.user_agent, "Accept": "text/html"},
            )
        logger.info("ImageResolver initialized", capacity=self._cache.capacity)

    async def shutdown(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_http_client and self._http is not None:
            await self._http.aclose()
            self._http = None
        logger.debug("ImageResolver shutdown")

    async def resolve(self, listing: CandidateListing) -> str | None:
        """Resolve the display image for a listing.

        A usable thumbnail from the search index wins. Otherwise the linked
        page is fetched and its og:image / twitter:image is used. Failures
        resolve to None and are cached like any other outcome.

        Args:
            listing: Listing to resolve an image for.

        Returns:
            Absolute HTTPS image URL, or None.
        """
        if _is_absolute_http(listing.thumbnail):
            return to_https(listing.thumbnail.strip())  # type: ignore[union-attr]

        link = listing.primary_link
        cached = self._cache.get(link)
        if cached is not None:
            return cached.url

        if self._http is None:
            logger.warning("HTTP client not initialized")
            return None

        image = await self._fetch_page_image(self._http, link)
        self._cache.put(link, image)
        return image

    async def _fetch_page_image(
        self,
        http: httpx.AsyncClient,
        link: str,
    ) -> str | None:
        try:
            response = await http.get(link)
            response.raise_for_status()
            return extract_page_image(response.text, str(response.url))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug("Image resolution failed", url=link, error=str(e))
            return None

"""Screening orchestrator.

Per category: primary query, fallback query when the primary finds
nothing, rating/price filtering, sequential ingredient screening up to
the per-category cap, ranking, then concurrent image enrichment.
Categories run one after another, and every outbound call is spaced by a
small politeness delay.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

from allergen_finder.core.config import get_settings
from allergen_finder.observability.logging import (
    bind_context,
    get_logger,
    unbind_context,
)
from allergen_finder.schemas.enums import CategoryStatus, SafetyVerdict
from allergen_finder.services.allergen import expand_allergens, match_allergens
from allergen_finder.services.screening.constants import (
    DISCLAIMER,
    SEARCH_FAILED_DETAIL,
)
from allergen_finder.services.screening.exceptions import (
    ConfigurationError,
    MalformedInputError,
    UpstreamUnavailableError,
)
from allergen_finder.services.screening.filters import (
    dedupe_listings,
    is_preferred_host,
    manufacturer_link,
    passes_price,
    passes_rating,
    rank_listings,
)
from allergen_finder.services.screening.models import (
    CategoryResult,
    ExcludedListing,
    ScreenedListing,
    ScreeningRequest,
    ScreeningResult,
)


if TYPE_CHECKING:
    from collections.abc import Iterable

    from allergen_finder.core.config import ScreeningSettings
    from allergen_finder.services.allergen import AllergenSet
    from allergen_finder.services.candidates import CandidateSource
    from allergen_finder.services.images import ImageResolver
    from allergen_finder.services.screening.models import CandidateListing


logger = get_logger(__name__)


class IngredientSource(Protocol):
    """Anything that can fetch ingredient text for a product link."""

    async def fetch_ingredients(self, url: str) -> str:
        """Return normalized ingredient text, or "" for no evidence."""
        ...


def _clean_terms(values: Iterable[str]) -> tuple[str, ...]:
    """Strip entries, drop blanks and case-insensitive duplicates."""
    seen: set[str] = set()
    cleaned: list[str] = []
    for value in values:
        text = " ".join(str(value).split())
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        cleaned.append(text)
    return tuple(cleaned)


def build_message(allergens: Iterable[str]) -> str:
    """Human-readable summary line that always carries the disclaimer."""
    terms = ", ".join(allergens) or "none"
    return f"Screened against ({terms}). {DISCLAIMER}"


class ScreeningService:
    """Runs the allergen screening pipeline.

    Example:
        ```python
        service = ScreeningService(candidates, extractor, image_resolver)
        result = await service.run(
            ScreeningRequest(allergens=("oxybenzone",), categories=("sunscreen",))
        )
        ```
    """

    def __init__(
        self,
        candidates: CandidateSource,
        extractor: IngredientSource,
        image_resolver: ImageResolver | None = None,
        settings: ScreeningSettings | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            candidates: Shopping search source.
            extractor: Ingredient text source for product pages.
            image_resolver: Optional display image resolver.
            settings: Screening settings (defaults to the cached settings).
        """
        self._candidates = candidates
        self._extractor = extractor
        self._images = image_resolver
        self._settings = settings or get_settings().screening

    def prepare(self, request: ScreeningRequest) -> ScreeningRequest:
        """Clean and validate a request.

        Raises:
            MalformedInputError: If no allergen or category remains after
                cleaning, or the price bounds are inverted.
        """
        allergens = _clean_terms(request.allergens)
        categories = _clean_terms(request.categories)
        if not allergens:
            msg = "At least one allergen is required"
            raise MalformedInputError(msg)
        if not categories:
            msg = "At least one category is required"
            raise MalformedInputError(msg)
        if (
            request.price_min is not None
            and request.price_max is not None
            and request.price_min > request.price_max
        ):
            msg = "price_min must not be greater than price_max"
            raise MalformedInputError(msg)

        location = (request.location or "").strip() or None
        rating_floor = request.rating_floor
        if rating_floor is None:
            rating_floor = self._settings.rating_floor
        return request.model_copy(
            update={
                "rating_floor": rating_floor,
                "allergens": allergens,
                "categories": categories,
                "purchase_sites": _clean_terms(request.purchase_sites),
                "location": location,
            }
        )

    async def run(self, request: ScreeningRequest) -> ScreeningResult:
        """Screen every requested category.

        Categories are processed sequentially under one overall deadline.
        When the deadline passes, the in-flight category is abandoned
        without a partial result and the remaining ones are skipped; the
        completed categories are returned with ``complete`` set to False.

        Args:
            request: The screening request.

        Returns:
            ScreeningResult with one CategoryResult per completed category.

        Raises:
            MalformedInputError: If the request is invalid.
            ConfigurationError: If the search credential is missing.
        """
        request = self.prepare(request)
        if not self._candidates.configured:
            msg = "Missing SERPAPI_API_KEY"
            raise ConfigurationError(msg)

        allergens = expand_allergens(request.allergens)
        location = await self._candidates.resolve_location(request.location)

        logger.info(
            "Screening started",
            categories=len(request.categories),
            allergens=len(allergens),
            location=location,
        )

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._settings.request_timeout
        results: list[CategoryResult] = []
        complete = True

        try:
            async with asyncio.timeout_at(deadline):
                for index, category in enumerate(request.categories):
                    if index:
                        await asyncio.sleep(self._settings.delays.between_categories)
                    bind_context(category=category)
                    result = await self.screen_category(
                        category,
                        allergens,
                        request,
                        location=location,
                    )
                    results.append(result)
        except TimeoutError:
            complete = False
            logger.warning(
                "Screening deadline reached",
                completed=len(results),
                requested=len(request.categories),
            )
        finally:
            unbind_context("category")

        return ScreeningResult(
            results=tuple(results),
            allergens=allergens.terms,
            complete=complete,
        )

    async def screen_category(
        self,
        category: str,
        allergens: AllergenSet,
        request: ScreeningRequest,
        *,
        location: str | None = None,
    ) -> CategoryResult:
        """Run the full pipeline for one category.

        Args:
            category: Product category, e.g. "sunscreen".
            allergens: Expanded allergen set.
            request: Cleaned request carrying the filters.
            location: Canonical location bias, if any.

        Returns:
            CategoryResult; ``search_failed`` only when both queries failed.
        """
        try:
            listings = await self._search(category, location)
        except UpstreamUnavailableError as e:
            logger.warning("Category search failed", error=str(e))
            return CategoryResult(
                category=category,
                status=CategoryStatus.SEARCH_FAILED,
                error=str(e) or SEARCH_FAILED_DETAIL,
            )

        survivors = self._filter(dedupe_listings(listings), request)
        logger.debug(
            "Candidates filtered",
            found=len(listings),
            survivors=len(survivors),
        )

        kept, excluded = await self._screen(survivors, allergens, request)
        ranked = rank_listings(kept)

        if self._images is not None and self._settings.image_enrichment_enabled:
            ranked = await self._enrich_images(ranked)

        logger.info("Category screened", kept=len(ranked), excluded=len(excluded))
        return CategoryResult(
            category=category,
            items=tuple(ranked),
            excluded=tuple(excluded),
        )

    async def _search(
        self,
        category: str,
        location: str | None,
    ) -> list[CandidateListing]:
        """Primary query, then the retailer-restricted fallback if needed.

        The fallback runs when the primary returns nothing or fails.

        Raises:
            UpstreamUnavailableError: If the fallback query fails.
        """
        primary = f"{category} {self._settings.primary_qualifier}".strip()
        try:
            listings = await self._candidates.search(primary, location)
        except UpstreamUnavailableError as e:
            logger.info("Primary query failed, trying fallback", error=str(e))
            listings = []

        if listings:
            return listings

        await asyncio.sleep(self._settings.delays.search_fallback)
        sites = " OR ".join(self._settings.fallback_retailers)
        fallback = f"{category} site:({sites})" if sites else category
        return await self._candidates.search(fallback, location)

    def _filter(
        self,
        listings: list[CandidateListing],
        request: ScreeningRequest,
    ) -> list[CandidateListing]:
        floor = request.rating_floor
        if floor is None:
            floor = self._settings.rating_floor
        survivors = [
            listing
            for listing in listings
            if passes_rating(
                listing,
                floor,
                unknown_passes=self._settings.unknown_rating_passes,
            )
        ]
        if self._settings.price_filter_enabled and request.has_price_bounds:
            survivors = [
                listing
                for listing in survivors
                if passes_price(listing, request.price_min, request.price_max)
            ]
        return survivors

    async def _screen(
        self,
        survivors: list[CandidateListing],
        allergens: AllergenSet,
        request: ScreeningRequest,
    ) -> tuple[list[ScreenedListing], list[ExcludedListing]]:
        """Fetch and match ingredients one candidate at a time."""
        cap = self._settings.max_items_per_category
        kept: list[ScreenedListing] = []
        excluded: list[ExcludedListing] = []

        for index, listing in enumerate(survivors):
            if len(kept) >= cap:
                break
            if index:
                await asyncio.sleep(self._settings.delays.between_candidates)

            text = await self._extractor.fetch_ingredients(listing.primary_link)
            match = match_allergens(text, allergens)

            if match.found:
                logger.debug(
                    "Candidate excluded",
                    url=listing.primary_link,
                    verdict=match.verdict,
                    term=match.term,
                )
                excluded.append(
                    ExcludedListing(
                        name=listing.name,
                        primary_link=listing.primary_link,
                        verdict=match.verdict,
                        matched_term=match.term,
                    )
                )
                continue

            if not text and self._settings.require_ingredient_evidence:
                logger.debug(
                    "Candidate dropped, no ingredients",
                    url=listing.primary_link,
                )
                continue

            preferred = is_preferred_host(listing.source_host, request.purchase_sites)
            kept.append(
                ScreenedListing(
                    **listing.model_dump(),
                    safety_verdict=SafetyVerdict.SAFE,
                    priority_score=1 if preferred else 0,
                    ingredients_checked=bool(text),
                    manufacturer_link=manufacturer_link(listing),
                )
            )

        return kept, excluded

    async def _enrich_images(
        self,
        listings: list[ScreenedListing],
    ) -> list[ScreenedListing]:
        """Resolve display images for the kept listings concurrently."""
        if not listings or self._images is None:
            return listings
        images = await asyncio.gather(
            *(self._images.resolve(listing) for listing in listings)
        )
        return [
            listing.model_copy(update={"resolved_image": image})
            for listing, image in zip(listings, images, strict=True)
        ]

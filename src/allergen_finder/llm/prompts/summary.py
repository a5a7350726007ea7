"""Prompt for rendering a screened shortlist as prose.

The model only formats results that were already screened; it is told
not to add products and never decides allergen safety itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Final

import orjson

from allergen_finder.llm.models import ChatMessage
from allergen_finder.llm.prompts.base import BasePrompt


if TYPE_CHECKING:
    from allergen_finder.services.screening.models import (
        ScreeningRequest,
        ScreeningResult,
    )


MEDICAL_DISCLAIMER: Final[str] = (
    "These recommendations are for informational purposes only and are not "
    "a substitute for medical advice. Please consult a qualified healthcare "
    "provider before trying new products."
)

SYSTEM_PROMPT: Final[str] = f"""\
You are an Allergen-Safe Product Finder.
Goal: present products that were screened against user-specified allergens, \
using trusted sources (manufacturer INCI, ACDS/CAMP guidance, PubMed/DermNet NZ, \
Mayo Clinic, Cleveland Clinic, peer-reviewed dermatology).

Rules:
- Only describe the items in the machine-readable list; never add products.
- Enforce user allergens and cross-reactivity watchlists (benzophenone family, \
fragrance, amidoamine/CAPB relationships, lanolin/amerchol, propolis).
- Items with "ingredientsChecked": false had no ingredient list available; say \
so instead of calling them verified.
- Only show products with an average rating >= {{rating_floor}} or items from \
clearly reputable sources if rating unknown.
- Provide at least two purchase links (manufacturer + reputable retailer) when \
possible.
- "Not found to contain" is a best-effort screening result, not a guarantee.
- End each response with the medical disclaimer: "{MEDICAL_DISCLAIMER}"
"""

OUTPUT_FORMAT: Final[str] = """\
For each category, list 2-4 items from the machine-readable list.
Use this structure:

[Category]
- Product: <Name, Size/Variant>
- Rating: <X.X/5 from N reviews>
- Links: <Manufacturer> | <Retailer 1> | <Retailer 2>
- Why: Not found to contain: <allergens>; Notes: <fragrance-free, mineral/chemical, etc.>
"""


def _join(values: tuple[str, ...] | list[str], default: str = "None") -> str:
    return ", ".join(values) if values else default


def build_user_prompt(request: ScreeningRequest) -> str:
    """Describe the shopper's constraints, one per line."""
    price_min = request.price_min if request.price_min is not None else "-"
    price_max = request.price_max if request.price_max is not None else "-"
    lines = [
        f"Allergens to exclude: {_join(request.allergens)}",
        f"Categories requested: {_join(request.categories)}",
        f"Budget: {price_min} to {price_max}",
        f"Minimum rating: {request.rating_floor}",
        "Preferred retailers: "
        + _join(request.purchase_sites, "Manufacturer + reputable retailers"),
        f"Region: {request.location or 'US'}",
    ]
    return "\n".join(lines)


def serialize_results(result: ScreeningResult) -> str:
    """Machine-readable shortlist (kept items only) as indented JSON."""
    payload = [
        {
            "category": category.category,
            "status": category.status,
            "items": [
                {
                    "name": item.name,
                    "rating": item.rating,
                    "reviews": item.review_count,
                    "price": item.price,
                    "links": {
                        "primary": item.primary_link,
                        "manufacturer": item.manufacturer_link,
                    },
                    "source": item.source,
                    "ingredientsChecked": item.ingredients_checked,
                }
                for item in category.items
            ],
        }
        for category in result.results
    ]
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()


class ShortlistSummaryPrompt(BasePrompt):
    """Renders screened results into a shopper-facing summary."""

    system_prompt: ClassVar[str | None] = SYSTEM_PROMPT
    temperature: ClassVar[float] = 0.2
    max_tokens: ClassVar[int | None] = 1200

    def build_messages(self, **kwargs: Any) -> list[ChatMessage]:
        """Build the conversation.

        Args:
            **kwargs: ``request`` (ScreeningRequest) and ``result``
                (ScreeningResult).

        Returns:
            System prompt, shopper constraints, output format and the
            machine-readable shortlist.

        Raises:
            ValueError: If ``request`` or ``result`` is missing.
        """
        request = kwargs.get("request")
        result = kwargs.get("result")
        if request is None or result is None:
            msg = "request and result are required"
            raise ValueError(msg)

        system = (self.system_prompt or "").replace(
            "{rating_floor}", str(request.rating_floor)
        )
        return [
            ChatMessage(role="system", content=system),
            ChatMessage(role="user", content=build_user_prompt(request)),
            ChatMessage(role="user", content=f"Format:\n{OUTPUT_FORMAT}"),
            ChatMessage(
                role="user",
                content=f"Proposed items (machine): {serialize_results(result)}",
            ),
        ]

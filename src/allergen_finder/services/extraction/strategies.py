"""Ingredient text extraction strategies.

Each strategy is a pure function from raw HTML to zero or more candidate
ingredient strings. Strategies are total: malformed markup or invalid
embedded JSON yields fewer candidates, never an exception. The cascade
runs every strategy and ``select_best_candidate`` picks the longest
surviving text, since real ingredient declarations are verbose and short
hits tend to be navigation or marketing copy.
"""

from __future__ import annotations

import html as html_lib
import json
import re
from typing import TYPE_CHECKING, Any, Final

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from allergen_finder.services.allergen.expander import normalize_term


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator


_JSONLD_PATTERN: Final = re.compile(
    r'<script[^>]+type=["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)

RETAILER_KEYS: Final[tuple[str, ...]] = (
    "ingredients",
    "ingredient_desc",
    "ingredientsText",
    "item_ingredients",
)

_RETAILER_PATTERNS: Final = tuple(
    re.compile(rf'"{re.escape(key)}"\s*:\s*"([^"]{{10,}})"', re.IGNORECASE)
    for key in RETAILER_KEYS
)

_META_NAMES: Final = frozenset({"ingredients", "product:ingredients"})

KEYWORDS: Final[tuple[str, ...]] = (
    "ingredients",
    "inci",
    "composition",
    "what's inside",
)
WINDOW_BEFORE: Final[int] = 800
WINDOW_AFTER: Final[int] = 2000
MIN_WINDOW_TEXT: Final[int] = 40
MAX_WINDOWS_PER_KEYWORD: Final[int] = 100

_TAG_PATTERN: Final = re.compile(r"<[^>]+>")
_WHITESPACE: Final = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


# =============================================================================
# Strategies
# =============================================================================


def from_structured_data(html: str) -> list[str]:
    """Collect string ``ingredients`` fields from JSON-LD blocks.

    Nested objects and arrays are walked recursively, so product data
    inside ``@graph`` or ``offers`` is found too. Blocks that fail to
    parse are skipped.
    """
    found: list[str] = []
    for block in _JSONLD_PATTERN.findall(html):
        try:
            data = json.loads(block.strip())
        except (json.JSONDecodeError, RecursionError):
            continue
        _collect_ingredients(data, found)
    return found


def _collect_ingredients(node: Any, found: list[str]) -> None:
    """Depth-first walk appending every string-valued ``ingredients`` key."""
    stack = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, dict):
            value = current.get("ingredients")
            if isinstance(value, str) and value.strip():
                found.append(value)
            children = list(current.values())
        elif isinstance(current, list):
            children = current
        else:
            continue
        stack.extend(v for v in reversed(children) if isinstance(v, dict | list))


def from_retailer_json(html: str) -> list[str]:
    """Pattern-match known ingredient keys inside inline state blobs.

    Matching is regex based, so truncated or invalid JSON elsewhere on the
    page does not hide a well-formed key/value pair.
    """
    found: list[str] = []
    for pattern in _RETAILER_PATTERNS:
        found.extend(pattern.findall(html))
    return found


def iter_meta_tags(html: str) -> Iterator[dict[str, str]]:
    """Yield the attributes of every <meta> tag, names lowercased.

    Multi-valued attributes are joined with single spaces.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup:
        return
    for tag in soup.find_all("meta"):
        if not isinstance(tag, Tag):
            continue
        yield {
            str(name).lower(): " ".join(value) if isinstance(value, list) else value
            for name, value in tag.attrs.items()
        }


def from_meta_tags(html: str) -> list[str]:
    """Collect ``content`` of ingredient meta tags (name or property)."""
    found: list[str] = []
    for attrs in iter_meta_tags(html):
        key = attrs.get("name") or attrs.get("property") or ""
        content = attrs.get("content", "")
        if key.lower() in _META_NAMES and len(content) >= 10:
            found.append(content)
    return found


def from_keyword_windows(html: str) -> list[str]:
    """Take text windows around ingredient keywords.

    For every case-insensitive keyword occurrence, the window from 800
    characters before to 2000 after is stripped of markup and whitespace
    collapsed; windows with more than 40 characters of text are kept.
    """
    lower = html.lower()
    found: list[str] = []
    for keyword in KEYWORDS:
        start = 0
        hits = 0
        while hits < MAX_WINDOWS_PER_KEYWORD:
            idx = lower.find(keyword, start)
            if idx == -1:
                break
            window = lower[max(0, idx - WINDOW_BEFORE) : idx + WINDOW_AFTER]
            text = _collapse(_TAG_PATTERN.sub(" ", window))
            if len(text) > MIN_WINDOW_TEXT:
                found.append(text)
            start = idx + len(keyword)
            hits += 1
    return found


STRATEGIES: Final[tuple[Callable[[str], list[str]], ...]] = (
    from_structured_data,
    from_retailer_json,
    from_meta_tags,
    from_keyword_windows,
)


# =============================================================================
# Reducer
# =============================================================================


def select_best_candidate(candidates: Iterable[str]) -> str:
    """Pick the longest candidate after entity decoding and whitespace cleanup.

    The first candidate wins ties, so earlier strategies take precedence
    over later ones at equal length.

    Returns:
        The chosen text, normalized (lowercase, single spaces), or "".
    """
    best = ""
    for raw in candidates:
        cleaned = _collapse(html_lib.unescape(raw).replace("\xa0", " "))
        if len(cleaned) > len(best):
            best = cleaned
    return normalize_term(best)


def extract_ingredient_text(html: str | None) -> str:
    """Run the full strategy cascade over a document.

    Args:
        html: Raw HTML; may be empty, malformed or unrelated to a product.

    Returns:
        Best-guess ingredient text, or "" when there is no evidence.
    """
    if not html:
        return ""
    pools: list[str] = []
    for strategy in STRATEGIES:
        pools.extend(strategy(html))
    return select_best_candidate(pools)

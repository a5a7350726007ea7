"""Allergen expansion.

Turns the user's allergen names into the full set of terms to screen for:
the normalized names, their same-substance synonyms, and the cross-reactor
watchlist terms of their families.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from allergen_finder.services.allergen.constants import (
    CROSS_REACTOR_FAMILIES,
    SAME_SUBSTANCE_SYNONYMS,
)


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


def normalize_term(raw: object) -> str:
    """Lowercase and collapse internal whitespace.

    Args:
        raw: Any value; non-strings are converted with ``str``.

    Returns:
        The normalized term, possibly empty.
    """
    if raw is None:
        return ""
    return " ".join(str(raw).lower().split())


def _closure(
    start: str,
    *relations: Mapping[str, tuple[str, ...]],
) -> tuple[str, ...]:
    """Everything reachable from ``start`` through the relations, in BFS order."""
    seen: dict[str, None] = {start: None}
    queue = [start]
    while queue:
        node = queue.pop(0)
        for relation in relations:
            for neighbour in relation.get(node, ()):
                if neighbour not in seen:
                    seen[neighbour] = None
                    queue.append(neighbour)
    return tuple(t for t in seen if t != start)


def _build_tables() -> tuple[
    Mapping[str, tuple[str, ...]],
    Mapping[str, tuple[str, ...]],
]:
    """Close both tables transitively so one lookup per key is enough."""
    keys = dict.fromkeys([*SAME_SUBSTANCE_SYNONYMS, *CROSS_REACTOR_FAMILIES])
    synonyms: dict[str, tuple[str, ...]] = {}
    watchlist: dict[str, tuple[str, ...]] = {}
    for key in keys:
        same = _closure(key, SAME_SUBSTANCE_SYNONYMS)
        related = _closure(key, SAME_SUBSTANCE_SYNONYMS, CROSS_REACTOR_FAMILIES)
        synonyms[key] = same
        watchlist[key] = tuple(t for t in related if t not in same)
    return MappingProxyType(synonyms), MappingProxyType(watchlist)


_SYNONYMS, _WATCHLIST = _build_tables()


@dataclass(frozen=True, slots=True)
class AllergenSet:
    """Immutable, ordered set of normalized allergen terms.

    Attributes:
        terms: Unique terms in insertion order (declared names first, per input).
        watchlist: The subset of ``terms`` reached only through cross-reactor
            families rather than named (or synonymous with a name) by the user.
    """

    terms: tuple[str, ...] = ()
    watchlist: frozenset[str] = field(default_factory=frozenset)

    def __iter__(self) -> Iterator[str]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self.terms

    @property
    def declared(self) -> tuple[str, ...]:
        """Terms that denote the user's allergens themselves."""
        return tuple(t for t in self.terms if t not in self.watchlist)

    @property
    def watchlist_terms(self) -> tuple[str, ...]:
        """Cross-reactor terms, in set order."""
        return tuple(t for t in self.terms if t in self.watchlist)


def expand_allergens(inputs: Iterable[str] | None) -> AllergenSet:
    """Expand user allergen names into the screening term set.

    Unknown names pass through unexpanded. Blank entries are ignored.
    An ``AllergenSet`` is already closed under both tables and is returned
    as is, so its watchlist tier survives re-expansion.

    Args:
        inputs: Raw allergen names, any casing or spacing, duplicates allowed.
            An existing ``AllergenSet`` is accepted too.

    Returns:
        The expanded AllergenSet.
    """
    if isinstance(inputs, AllergenSet):
        return inputs

    terms: dict[str, None] = {}
    watchlist: set[str] = set()

    for raw in inputs or ():
        key = normalize_term(raw)
        if not key:
            continue

        for term in (key, *_SYNONYMS.get(key, ())):
            terms.setdefault(term, None)
            watchlist.discard(term)

        for term in _WATCHLIST.get(key, ()):
            if term not in terms:
                terms[term] = None
                watchlist.add(term)

    return AllergenSet(terms=tuple(terms), watchlist=frozenset(watchlist))

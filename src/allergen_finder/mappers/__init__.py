"""Data mappers between search index records, screening models and API schemas."""

from allergen_finder.mappers.listing import (
    host_of,
    map_shopping_result,
    map_shopping_results,
)


__all__ = ["host_of", "map_shopping_result", "map_shopping_results"]

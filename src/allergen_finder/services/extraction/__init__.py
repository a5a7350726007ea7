"""Ingredient text extraction."""

from allergen_finder.services.extraction.service import IngredientExtractor
from allergen_finder.services.extraction.strategies import (
    extract_ingredient_text,
    select_best_candidate,
)


__all__ = ["IngredientExtractor", "extract_ingredient_text", "select_best_candidate"]

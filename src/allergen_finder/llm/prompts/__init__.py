"""LLM prompt definitions."""

from allergen_finder.llm.prompts.base import BasePrompt
from allergen_finder.llm.prompts.summary import (
    MEDICAL_DISCLAIMER,
    ShortlistSummaryPrompt,
)


__all__ = ["MEDICAL_DISCLAIMER", "BasePrompt", "ShortlistSummaryPrompt"]

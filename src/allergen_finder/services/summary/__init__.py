"""Optional summarization of screening results."""

from allergen_finder.services.summary.service import SummaryService


__all__ = ["SummaryService"]

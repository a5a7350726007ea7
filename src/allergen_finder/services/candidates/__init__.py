"""Candidate listing search."""

from allergen_finder.services.candidates.service import CandidateSource


__all__ = ["CandidateSource"]

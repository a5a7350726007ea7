"""Allergen-screened product finder service."""

__version__ = "0.1.0"

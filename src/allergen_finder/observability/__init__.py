"""Observability: structured logging."""

from allergen_finder.observability.logging import get_logger, setup_logging


__all__ = ["get_logger", "setup_logging"]

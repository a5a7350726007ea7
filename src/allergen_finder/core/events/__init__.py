"""Application lifecycle events."""

from allergen_finder.core.events.lifespan import lifespan


__all__ = ["lifespan"]

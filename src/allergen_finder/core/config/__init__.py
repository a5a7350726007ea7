"""Configuration module with YAML and environment variable support."""

from .settings import (
    ImageSettings,
    LLMSettings,
    ScreeningDelays,
    ScreeningSettings,
    SerpApiSettings,
    Settings,
    get_settings,
)


__all__ = [
    "ImageSettings",
    "LLMSettings",
    "ScreeningDelays",
    "ScreeningSettings",
    "SerpApiSettings",
    "Settings",
    "get_settings",
]

"""Shared test fixtures and configuration for the Allergen Finder tests.

APP_ENV is forced to ``test`` before any settings are loaded, so the YAML
overrides in config/environments/test/ (zero politeness delays, summaries
disabled) apply to every test.
"""

from __future__ import annotations

import os


os.environ["APP_ENV"] = "test"

from typing import TYPE_CHECKING  # noqa: E402

import pytest  # noqa: E402

from allergen_finder.core.config import (  # noqa: E402
    ImageSettings,
    LLMSettings,
    ScreeningDelays,
    ScreeningSettings,
    Settings,
    get_settings,
)


if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    """Drop the cached settings so env changes in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def screening_settings() -> ScreeningSettings:
    """Screening settings with no politeness delays."""
    return ScreeningSettings(
        delays=ScreeningDelays(
            search_fallback=0.0,
            between_candidates=0.0,
            between_categories=0.0,
        ),
        request_timeout=5.0,
    )


@pytest.fixture
def test_settings(screening_settings: ScreeningSettings) -> Settings:
    """Application settings for tests, with a fake search credential."""
    return Settings(
        APP_ENV="test",
        SERPAPI_API_KEY="test-serpapi-key",
        LLM_API_KEY="",
        screening=screening_settings,
        images=ImageSettings(cache_capacity=16),
        llm=LLMSettings(enabled=False),
    )

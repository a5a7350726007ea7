"""Application configuration using Pydantic Settings with YAML support.

This module provides centralized configuration management with:
- YAML-based configuration files organized by domain
- Environment-specific overrides (local, test, development, production)
- Environment variable loading for secrets
- Type validation and coercion
- Caching for performance
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Allergen Finder"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8000


class ApiSettings(BaseModel):
    """API configuration settings."""

    v1_prefix: str = "/api/v1/allergen-finder"
    cors_origins: list[str] = []


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"


class SerpApiSettings(BaseModel):
    """Shopping search index (SerpAPI) settings."""

    base_url: str = "https://serpapi.com/search.json"
    locations_url: str = "https://serpapi.com/locations.json"
    engine: str = "google_shopping"
    gl: str = "us"
    hl: str = "en"
    num: int = 12
    timeout: float = 20.0
    location_timeout: float = 10.0


class FetchSettings(BaseModel):
    """Product page fetching settings for ingredient extraction."""

    page_timeout: float = 20.0
    max_document_chars: int = 3_000_000
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )


class ImageSettings(BaseModel):
    """Display image resolution settings."""

    enabled: bool = True
    timeout: float = 8.0
    cache_capacity: int = Field(default=500, ge=1)
    user_agent: str = "AllergenFinderImageBot/1.0 (+og-image-resolver)"


class ScreeningDelays(BaseModel):
    """Politeness delays (seconds) between outbound calls."""

    search_fallback: float = 0.6
    between_candidates: float = 0.2
    between_categories: float = 0.5


class ScreeningSettings(BaseModel):
    """Screening pipeline configuration.

    The boolean flags cover the behavioural differences between deployments
    (price filtering, location bias, image enrichment) and the two
    benefit-of-the-doubt policies for missing data.
    """

    rating_floor: float = Field(default=4.0, ge=0, le=5)
    max_items_per_category: int = Field(default=8, ge=1)
    primary_qualifier: str = "fragrance free"
    fallback_retailers: list[str] = [
        "sephora.com",
        "ulta.com",
        "target.com",
        "amazon.com",
    ]
    request_timeout: float = 240.0
    delays: ScreeningDelays = ScreeningDelays()
    price_filter_enabled: bool = True
    location_bias_enabled: bool = True
    image_enrichment_enabled: bool = True
    unknown_rating_passes: bool = True
    require_ingredient_evidence: bool = False


class LLMSettings(BaseModel):
    """Downstream summarization model settings (OpenAI-compatible API)."""

    enabled: bool = True
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    timeout: float = 30.0
    max_retries: int = 2
    requests_per_minute: float = 30.0
    temperature: float = 0.2

    @property
    def total_timeout(self) -> float:
        """Budget for one completion with every retry attempt included."""
        return self.timeout * (self.max_retries + 1)


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Configuration is loaded from multiple sources with the following priority
    (highest to lowest):
    1. Environment variables
    2. .env file (secrets only)
    3. Environment-specific YAML files (config/environments/{APP_ENV}/)
    4. Base YAML files (config/base/)
    5. Default values in code

    Environment variables can override any setting using the nested delimiter '__'.
    For example: SCREENING__RATING_FLOOR=4.5 overrides screening.rating_floor.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    logging: LoggingSettings = LoggingSettings()
    serpapi: SerpApiSettings = SerpApiSettings()
    fetch: FetchSettings = FetchSettings()
    images: ImageSettings = ImageSettings()
    screening: ScreeningSettings = ScreeningSettings()
    llm: LLMSettings = LLMSettings()

    # =========================================================================
    # Secrets (from .env only - never in YAML)
    # =========================================================================
    SERPAPI_API_KEY: str = ""
    LLM_API_KEY: str = ""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings loading order.

        Priority (highest to lowest):
        1. init_settings - Values passed to Settings()
        2. env_settings - Environment variables
        3. dotenv_settings - .env file (secrets)
        4. yaml_settings - YAML files (base + environment)
        5. file_secret_settings - Docker secrets
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def summarization_available(self) -> bool:
        """Whether the downstream summarization model can be called."""
        return self.llm.enabled and bool(self.LLM_API_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_non_production(self) -> bool:
        """Check if running in a non-production environment.

        Returns True for local, test, and development environments where
        API documentation and detailed error messages should be enabled.
        """
        return self.APP_ENV in ("local", "test", "development")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Using lru_cache ensures settings are only loaded once,
    improving performance and consistency.
    """
    return Settings()

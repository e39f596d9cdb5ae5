"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
provider API keys, Nominatim politeness settings, cache TTL, client
rate limiting and logging.

Google keys keep the names the deployment already uses:
- GOOGLE_PLACES_API_KEY (falls back to GOOGLE_API_KEY)
- GOOGLE_GEOCODING_API_KEY (falls back to GOOGLE_API_KEY)
- GOOGLE_API_KEY_TEXT_EXTRACT (falls back to GOOGLE_API_KEY)

Everything else can be overridden via ITR_ prefixed variables:
- ITR_CACHE_TTL_SECONDS=600
- ITR_RATE_LIMIT_MIN_INTERVAL_SECONDS=2
- ITR_NOMINATIM_USER_AGENT=my-app/1.0
- ITR_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GoogleConfig(BaseSettings):
    """Google Places and Geocoding configuration.

    Missing keys are not an error: the resolver then skips the
    Google stages and relies on Nominatim alone.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_GOOGLE_", populate_by_name=True)

    api_key: Optional[str] = Field(default=None, validation_alias="GOOGLE_API_KEY")
    places_api_key: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_PLACES_API_KEY"
    )
    geocoding_api_key: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_GEOCODING_API_KEY"
    )
    language: str = "en"
    timeout_seconds: float = 10.0
    details_timeout_seconds: float = 4.5
    places_base_url: str = "https://maps.googleapis.com/maps/api/place"
    places_v1_base_url: str = "https://places.googleapis.com/v1"

    @property
    def resolved_places_key(self) -> Optional[str]:
        """Places key, falling back to the shared Google key."""
        return self.places_api_key or self.api_key or None

    @property
    def resolved_geocoding_key(self) -> Optional[str]:
        """Geocoding key, falling back to the shared Google key."""
        return self.geocoding_api_key or self.api_key or None


class NominatimConfig(BaseSettings):
    """OpenStreetMap Nominatim configuration.

    Environment variables prefixed with ITR_NOMINATIM_.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_NOMINATIM_")

    user_agent: str = "itinerary-resolver/1.0"
    language: str = "en"
    result_limit: int = 5
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 0
    error_wait_seconds: float = 2.0


class GeminiConfig(BaseSettings):
    """Language-model extraction configuration.

    The extractor is optional: without a key the extraction flow
    falls back to the rule-based parser.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_GEMINI_", populate_by_name=True)

    api_key: Optional[str] = Field(default=None, validation_alias="GOOGLE_API_KEY")
    text_extract_api_key: Optional[str] = Field(
        default=None, validation_alias="GOOGLE_API_KEY_TEXT_EXTRACT"
    )
    model: str = Field(
        default="gemini-2.0-flash",
        validation_alias=AliasChoices("GEMINI_MODEL", "GOOGLE_GEMINI_MODEL"),
    )
    text_model: Optional[str] = Field(
        default=None, validation_alias="GEMINI_TEXT_EXT_MODEL"
    )
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    temperature: float = 0.7
    max_output_tokens: int = 2048
    timeout_seconds: float = 30.0

    @property
    def resolved_api_key(self) -> Optional[str]:
        return self.text_extract_api_key or self.api_key or None

    @property
    def resolved_model(self) -> str:
        return self.text_model or self.model


class CacheConfig(BaseSettings):
    """Geocode result cache configuration.

    Environment variables prefixed with ITR_CACHE_.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_CACHE_")

    enabled: bool = True
    ttl_seconds: float = 60 * 60


class RateLimitConfig(BaseSettings):
    """Per-client request spacing for the geocode and place search endpoints.

    Environment variables prefixed with ITR_RATE_LIMIT_.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_RATE_LIMIT_")

    min_interval_seconds: float = 1.1
    place_search_min_interval_seconds: float = 0.3


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with ITR_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    This is the main entry point for configuration. Sub-configurations
    can be accessed via attributes:

        config = get_config()
        print(config.google.resolved_places_key)
        print(config.cache.ttl_seconds)

    Environment variables prefixed with ITR_.
    """

    model_config = SettingsConfigDict(env_prefix="ITR_")

    google: GoogleConfig = Field(default_factory=GoogleConfig)
    nominatim: NominatimConfig = Field(default_factory=NominatimConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    canonicalize_extracted_places: bool = True
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache.

    Call this in tests to ensure a fresh configuration is loaded.
    """
    get_config.cache_clear()

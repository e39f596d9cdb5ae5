"""Tests for configuration, wiring and logging setup."""

import json
import logging

import pytest

from itinerary_resolver.adapters.cache import InMemoryCache, NullCache
from itinerary_resolver.adapters.llm import GeminiPlaceExtractor
from itinerary_resolver.config import AppConfig, CacheConfig, ObservabilityConfig, get_config
from itinerary_resolver.container import Container, get_container, reset_container
from itinerary_resolver.logging_config import JsonFormatter, configure_logging
from itinerary_resolver.ports.cache import KeyValueStorePort
from itinerary_resolver.ports.nlp import PlaceExtractorPort
from itinerary_resolver.services import (
    GeocodeService,
    ItineraryExtractionService,
    PlaceDetailsService,
    PlaceResolver,
    PlaceSearchService,
)


class TestConfig:
    def test_google_keys_fall_back_to_shared_key(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "shared")
        monkeypatch.setenv("GOOGLE_GEOCODING_API_KEY", "geo")

        config = get_config()

        assert config.google.resolved_places_key == "shared"
        assert config.google.resolved_geocoding_key == "geo"
        assert config.gemini.resolved_api_key == "shared"

    def test_prefixed_overrides(self, monkeypatch):
        monkeypatch.setenv("ITR_CACHE_TTL_SECONDS", "600")
        monkeypatch.setenv("ITR_RATE_LIMIT_MIN_INTERVAL_SECONDS", "2")

        config = AppConfig()

        assert config.cache.ttl_seconds == 600
        assert config.rate_limit.min_interval_seconds == 2

    def test_text_model_wins(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL", "gemini-1.5-flash")
        assert AppConfig().gemini.resolved_model == "gemini-1.5-flash"

        monkeypatch.setenv("GEMINI_TEXT_EXT_MODEL", "gemini-2.5-flash")
        assert AppConfig().gemini.resolved_model == "gemini-2.5-flash"

    def test_get_config_is_cached(self):
        assert get_config() is get_config()


class TestContainer:
    def test_create_default_wires_services(self):
        container = Container.create_default(AppConfig())

        geocode = container.resolve(GeocodeService)
        assert isinstance(geocode.cache, InMemoryCache)
        assert [p.source for p in geocode.resolver.providers] == [
            "places",
            "geocoding",
            "nominatim",
        ]
        assert geocode.resolver is container.resolve(PlaceResolver)

        extraction = container.resolve(ItineraryExtractionService)
        assert isinstance(extraction.extractor, GeminiPlaceExtractor)
        assert not extraction.extractor.is_configured
        assert isinstance(container.resolve(PlaceDetailsService), PlaceDetailsService)

        search = container.resolve(PlaceSearchService)
        assert search.resolver is container.resolve(PlaceResolver)
        assert search.rate_limiter.min_interval_seconds == 0.3
        assert search.rate_limiter is not geocode.rate_limiter

    def test_disabled_cache_uses_null_store(self):
        config = AppConfig(cache=CacheConfig(enabled=False))
        container = Container.create_default(config)

        assert isinstance(container.resolve(KeyValueStorePort), NullCache)

    def test_unregistered_type(self):
        with pytest.raises(KeyError):
            Container().resolve(PlaceExtractorPort)

    def test_global_container_is_reset(self):
        first = get_container()
        assert get_container() is first

        reset_container()
        assert get_container() is not first


class TestLogging:
    def test_json_formatter_keeps_extra_fields(self):
        record = logging.LogRecord(
            "itinerary_resolver.test", logging.INFO, __file__, 1, "resolved %s", ("Alfama",), None
        )
        record.provider = "nominatim"

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "resolved Alfama"
        assert payload["level"] == "INFO"
        assert payload["provider"] == "nominatim"
        assert "args" not in payload

    def test_configure_logging_sets_level_and_formatter(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(ObservabilityConfig(level="debug", structured=True))

            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

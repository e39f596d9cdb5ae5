"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - for web server contexts
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        geocoder = container.resolve(GeocodeService)

        # Testing
        container = Container()
        container.register(PlaceExtractorPort, lambda: FakeExtractor())
        extractor = container.resolve(PlaceExtractorPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            if singleton:
                self._singleton_types.add(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Args:
            port_type: The type to resolve.

        Returns:
            An instance of the requested type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        """Check if a type is registered.

        Args:
            port_type: The type to check.

        Returns:
            True if the type is registered.
        """
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons.

        Call this in tests to ensure fresh instances.
        """
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        """Clear all registrations and singletons.

        Call this to completely reset the container.
        """
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        This creates a fully configured container with all adapters
        registered and ready to use. Providers without credentials are
        still registered; the resolver skips them at call time.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        import requests

        from .adapters.cache import InMemoryCache, NullCache
        from .adapters.geocoding import (
            GoogleGeocodingAdapter,
            GooglePlacesAdapter,
            NominatimAdapter,
        )
        from .adapters.llm import GeminiPlaceExtractor
        from .adapters.nlp import RuleBasedItineraryParser
        from .adapters.places import PlaceDetailsClient
        from .adapters.ratelimit import ClientRateLimiter
        from .ports.cache import KeyValueStorePort
        from .ports.nlp import ItineraryParserPort, PlaceExtractorPort
        from .ports.places import PlaceDetailsClientPort
        from .services import (
            GeocodeService,
            ItineraryExtractionService,
            PlaceDetailsService,
            PlaceResolver,
            PlaceSearchService,
        )

        config = config or get_config()
        container = cls(config=config)

        # One HTTP session shared by the requests-based adapters
        session = requests.Session()

        # Geocode result cache
        def create_cache() -> KeyValueStorePort:
            if not config.cache.enabled:
                return NullCache()
            return InMemoryCache(ttl_seconds=config.cache.ttl_seconds, name="geocode")

        container.register(KeyValueStorePort, create_cache)
        container.register(
            ClientRateLimiter,
            lambda: ClientRateLimiter(config.rate_limit.min_interval_seconds),
        )

        # Provider chain, in fallback order
        container.register(
            PlaceResolver,
            lambda: PlaceResolver(
                providers=(
                    GooglePlacesAdapter(config.google, session),
                    GoogleGeocodingAdapter(config.google),
                    NominatimAdapter(config.nominatim),
                )
            ),
        )

        # Itinerary text
        container.register(ItineraryParserPort, lambda: RuleBasedItineraryParser())
        container.register(
            PlaceExtractorPort,
            lambda: GeminiPlaceExtractor(config.gemini, session),
        )

        # Place details
        container.register(
            PlaceDetailsClientPort,
            lambda: PlaceDetailsClient(config.google, session),
        )

        # Services
        container.register(
            GeocodeService,
            lambda: GeocodeService(
                resolver=container.resolve(PlaceResolver),
                cache=container.resolve(KeyValueStorePort),
                rate_limiter=container.resolve(ClientRateLimiter),
            ),
        )
        container.register(
            ItineraryExtractionService,
            lambda: ItineraryExtractionService(
                parser=container.resolve(ItineraryParserPort),
                extractor=container.resolve(PlaceExtractorPort),
                resolver=container.resolve(PlaceResolver),
                canonicalize=config.canonicalize_extracted_places,
            ),
        )
        container.register(
            PlaceDetailsService,
            lambda: PlaceDetailsService(container.resolve(PlaceDetailsClientPort)),
        )
        container.register(
            PlaceSearchService,
            lambda: PlaceSearchService(
                client=container.resolve(PlaceDetailsClientPort),
                resolver=container.resolve(PlaceResolver),
                # Own limiter: search spacing is independent of geocoding
                rate_limiter=ClientRateLimiter(
                    config.rate_limit.place_search_min_interval_seconds,
                    message="Too many requests. Please retry shortly.",
                ),
            ),
        )

        return container


# Global default container (lazy initialized)
_default_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get the default application container.

    Returns:
        The default Container instance (creates one if needed).
    """
    global _default_container
    if _default_container is None:
        with _container_lock:
            if _default_container is None:
                _default_container = Container.create_default()
    return _default_container


def reset_container() -> None:
    """Reset the default container.

    Call this in tests to ensure a fresh container.
    """
    global _default_container
    with _container_lock:
        if _default_container is not None:
            _default_container.clear_all()
        _default_container = None

"""Dependency injection container."""

from typing import Any, Optional, Sequence

import httpx

from geo_redirect.application.ports.geo_ip_provider import GeoIpProvider
from geo_redirect.application.ports.key_value_store import KeyValueStore
from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.application.use_cases.geo_resolution import GeoResolutionService
from geo_redirect.application.use_cases.resolve_destination import ResolveDestinationUseCase
from geo_redirect.infrastructure.config.settings import Settings
from geo_redirect.infrastructure.wiring.dependencies import (
    create_configuration_store,
    create_geo_ip_providers,
    create_geo_resolution_service,
    create_http_client,
    create_key_value_store,
    create_self_lookup_provider,
)

_UNSET = object()


class Container:
    """Composition root: builds each service once and hands out the instances."""

    def __init__(
        self,
        settings: Settings,
        key_value_store: Optional[KeyValueStore] = None,
        geo_ip_providers: Optional[Sequence[GeoIpProvider]] = None,
        self_lookup_provider: Any = _UNSET,
    ) -> None:
        """
        Initialize container with dependencies.

        Args:
            settings: Application settings
            key_value_store: Store override (defaults to Redis with fallback)
            geo_ip_providers: Provider override (defaults to HTTP providers)
            self_lookup_provider: Self-lookup override; pass None to disable
        """
        self._settings = settings
        self._http_client: Optional[httpx.AsyncClient] = None

        # Key-value store
        if key_value_store is None:
            key_value_store = create_key_value_store(settings)
        self._key_value_store = key_value_store

        # Geo-IP providers share one HTTP client
        if geo_ip_providers is None or self_lookup_provider is _UNSET:
            self._http_client = create_http_client()
        if geo_ip_providers is None:
            geo_ip_providers = create_geo_ip_providers(settings, self._http_client)
        if self_lookup_provider is _UNSET:
            self_lookup_provider = create_self_lookup_provider(settings, self._http_client)

        # Services
        self._configuration_store = create_configuration_store(settings, self._key_value_store)
        self._geo_resolution_service = create_geo_resolution_service(
            settings, self._key_value_store, list(geo_ip_providers), self_lookup_provider
        )

        # Use cases
        self._resolve_destination_use_case = ResolveDestinationUseCase(
            self._geo_resolution_service, self._configuration_store
        )

    @property
    def settings(self) -> Settings:
        """Get settings."""
        return self._settings

    @property
    def key_value_store(self) -> KeyValueStore:
        """Get key-value store."""
        return self._key_value_store

    @property
    def configuration_store(self) -> ConfigurationStore:
        """Get configuration store."""
        return self._configuration_store

    @property
    def geo_resolution_service(self) -> GeoResolutionService:
        """Get geo-resolution service."""
        return self._geo_resolution_service

    @property
    def resolve_destination_use_case(self) -> ResolveDestinationUseCase:
        """Get destination use case."""
        return self._resolve_destination_use_case

    async def startup(self) -> None:
        """Connect the durable store if it supports connecting."""
        connect = getattr(self._key_value_store, "connect", None)
        if connect is not None:
            await connect()

    async def close(self) -> None:
        """Release HTTP and storage connections."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        close = getattr(self._key_value_store, "close", None)
        if close is not None:
            await close()

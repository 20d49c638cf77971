"""Dependency injection factory functions."""

from typing import Optional

import httpx
from fastapi import Request

from geo_redirect.adapters.outbound.geo_ip import (
    create_ip_api_provider,
    create_ipapi_provider,
    create_ipinfo_provider,
    create_ipinfo_self_lookup,
)
from geo_redirect.adapters.outbound.geo_ip.http_geo_ip_provider import (
    DEFAULT_TIMEOUT_MS,
    USER_AGENT,
)
from geo_redirect.adapters.outbound.key_value_store import RedisKeyValueStore
from geo_redirect.application.ports.geo_ip_provider import GeoIpProvider
from geo_redirect.application.ports.key_value_store import KeyValueStore
from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.application.use_cases.geo_resolution import GeoResolutionService
from geo_redirect.application.use_cases.resolve_destination import ResolveDestinationUseCase
from geo_redirect.infrastructure.config.settings import Settings


def create_key_value_store(settings: Settings) -> RedisKeyValueStore:
    """
    Factory function to create the key-value store.

    Returns:
        RedisKeyValueStore (in-memory fallback when REDIS_URL is empty)
    """
    return RedisKeyValueStore(
        settings.redis_url,
        max_reconnect_attempts=settings.redis_max_reconnect_attempts,
        reconnect_interval_seconds=settings.redis_reconnect_interval_seconds,
    )


def create_http_client() -> httpx.AsyncClient:
    """
    Factory function to create the shared HTTP client for providers.

    The client has no timeout of its own; each provider bounds its request
    with its configured timeout.

    Returns:
        httpx.AsyncClient instance
    """
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT}, follow_redirects=True, timeout=None
    )


def _provider_timeout_ms(settings: Settings) -> int:
    return settings.geo_timeout or DEFAULT_TIMEOUT_MS


def create_geo_ip_providers(
    settings: Settings, http_client: httpx.AsyncClient
) -> list[GeoIpProvider]:
    """
    Factory function to create geo-IP providers in failover order.

    Returns:
        List of providers: ipinfo, ipapi, ip-api
    """
    timeout_ms = _provider_timeout_ms(settings)
    return [
        create_ipinfo_provider(http_client, settings.ipinfo_token, timeout_ms),
        create_ipapi_provider(http_client, timeout_ms),
        create_ip_api_provider(http_client, timeout_ms),
    ]


def create_self_lookup_provider(
    settings: Settings, http_client: httpx.AsyncClient
) -> Optional[GeoIpProvider]:
    """
    Factory function to create the self-lookup provider.

    Returns:
        Provider if IPINFO_TOKEN is set, None otherwise
    """
    if not settings.ipinfo_token:
        return None
    return create_ipinfo_self_lookup(http_client, settings.ipinfo_token, _provider_timeout_ms(settings))


def create_configuration_store(
    settings: Settings, key_value_store: KeyValueStore
) -> ConfigurationStore:
    """
    Factory function to create the configuration store.

    Returns:
        ConfigurationStore instance
    """
    return ConfigurationStore(
        key_value_store,
        defaults_factory=settings.default_redirect_configuration,
        cache_ttl_seconds=settings.config_cache_ttl,
    )


def create_geo_resolution_service(
    settings: Settings,
    key_value_store: KeyValueStore,
    providers: list[GeoIpProvider],
    self_lookup: Optional[GeoIpProvider],
) -> GeoResolutionService:
    """
    Factory function to create the geo-resolution service.

    Returns:
        GeoResolutionService instance
    """
    return GeoResolutionService(
        key_value_store,
        providers,
        self_lookup=self_lookup,
        cache_ttl_seconds=settings.geo_cache_ttl,
    )


def get_container(request: Request):
    """FastAPI dependency returning the app's composition root."""
    return request.app.state.container


def get_configuration_store(request: Request) -> ConfigurationStore:
    """FastAPI dependency returning the configuration store."""
    return get_container(request).configuration_store


def get_geo_resolution_service(request: Request) -> GeoResolutionService:
    """FastAPI dependency returning the geo-resolution service."""
    return get_container(request).geo_resolution_service


def get_resolve_destination_use_case(request: Request) -> ResolveDestinationUseCase:
    """FastAPI dependency returning the destination use case."""
    return get_container(request).resolve_destination_use_case


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the app's settings."""
    return get_container(request).settings

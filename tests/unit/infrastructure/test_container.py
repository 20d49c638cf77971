"""Unit tests for the composition root and application lifespan."""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from geo_redirect.adapters.outbound.key_value_store import InMemoryKeyValueStore, RedisKeyValueStore
from geo_redirect.domain.exceptions import ConfigurationError
from geo_redirect.infrastructure.wiring.container import Container
from geo_redirect.infrastructure.wiring.dependencies import (
    create_geo_ip_providers,
    create_http_client,
)
from geo_redirect.main import create_app


@pytest.mark.asyncio
async def test_default_wiring(test_settings):
    """Test the default container wires HTTP providers and the Redis store."""
    container = Container(test_settings)

    assert isinstance(container.key_value_store, RedisKeyValueStore)
    assert container.geo_resolution_service.provider_names == ["ipinfo", "ipapi", "ip-api"]
    assert container.geo_resolution_service.cache_ttl_seconds == 86400

    await container.close()


@pytest.mark.asyncio
async def test_provider_timeout_is_not_capped_by_http_client(test_settings):
    """Test a geo timeout above the HTTP client default is honored as configured."""
    settings = test_settings.model_copy(update={"geo_timeout": 8000})
    client = create_http_client()

    providers = create_geo_ip_providers(settings, client)

    assert client.timeout.connect is None
    assert client.timeout.read is None
    assert [provider.timeout_ms for provider in providers] == [8000, 8000, 8000]
    await client.aclose()


@pytest.mark.asyncio
async def test_self_lookup_override_and_default(test_settings, make_provider):
    """Test an injected self-lookup is used and the default needs an ipinfo token."""
    injected = Container(
        test_settings,
        key_value_store=InMemoryKeyValueStore(),
        geo_ip_providers=[],
        self_lookup_provider=make_provider("ipinfo-self", "TR"),
    )
    defaulted = Container(
        test_settings, key_value_store=InMemoryKeyValueStore(), geo_ip_providers=[]
    )

    assert await injected.geo_resolution_service.resolve_country("10.0.0.1") == "TR"
    assert await defaulted.geo_resolution_service.resolve_country("10.0.0.1") == "REST"

    await injected.close()
    await defaulted.close()


@pytest.mark.asyncio
async def test_empty_store_override_is_kept(test_settings):
    """Test an empty in-memory store passed in is used as-is."""
    store = InMemoryKeyValueStore()

    container = Container(test_settings, key_value_store=store, geo_ip_providers=[])

    assert container.key_value_store is store
    await container.close()


@pytest.mark.asyncio
async def test_startup_without_redis_url_stays_on_memory(test_settings):
    """Test startup with no Redis URL leaves the store on its fallback."""
    container = Container(test_settings, geo_ip_providers=[], self_lookup_provider=None)

    await container.startup()
    health = await container.key_value_store.health_check()

    assert health["status"] == "degraded"
    assert health["type"] == "memory"
    await container.close()


@pytest.mark.asyncio
async def test_lifespan_runs_with_valid_settings(test_settings):
    """Test the app starts and serves with valid settings."""
    container = Container(test_settings, geo_ip_providers=[], self_lookup_provider=None)

    with TestClient(create_app(container=container)) as client:
        response = client.get("/")

    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
async def test_lifespan_refuses_missing_admin_token(test_settings):
    """Test the app refuses to start without an admin token."""
    settings = test_settings.model_copy(update={"admin_token": ""})
    container = Container(settings, geo_ip_providers=[], self_lookup_provider=None)

    with pytest.raises(ConfigurationError):
        with TestClient(create_app(container=container)):
            pass

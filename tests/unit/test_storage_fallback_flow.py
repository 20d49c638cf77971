"""End-to-end flow with Redis unreachable."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

from geo_redirect.adapters.outbound.key_value_store import RedisKeyValueStore
from geo_redirect.infrastructure.wiring.container import Container
from geo_redirect.main import create_app

FROM_URL = (
    "geo_redirect.adapters.outbound.key_value_store.redis_key_value_store.aioredis.from_url"
)


@pytest.mark.asyncio
async def test_admin_update_succeeds_while_redis_is_down(test_settings, make_provider):
    """Test configuration writes and redirects keep working on the memory fallback."""
    redis_client = AsyncMock()
    redis_client.ping = AsyncMock(side_effect=RedisConnectionError("refused"))
    store = RedisKeyValueStore("redis://unreachable:6379/0", max_reconnect_attempts=0)
    provider = make_provider("ipinfo", "TR")
    container = Container(
        test_settings,
        key_value_store=store,
        geo_ip_providers=[provider],
        self_lookup_provider=None,
    )
    client = TestClient(create_app(container=container))
    auth = {"X-Admin-Token": test_settings.admin_token}

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = redis_client

        update = client.post(
            "/admin/api/config", json={"turkey_destination_number": "905550001122"}, headers=auth
        )
        await container.configuration_store.clear_cache()
        redirect = client.get(
            "/wa", headers={"X-Forwarded-For": "85.34.78.112"}, follow_redirects=False
        )
        health = client.get("/admin/api/health", headers=auth).json()["health"]

    assert update.status_code == status.HTTP_200_OK
    assert redirect.headers["location"].startswith("https://wa.me/905550001122")
    assert health["config"]["storage"]["status"] == "degraded"
    assert store.is_connected is False

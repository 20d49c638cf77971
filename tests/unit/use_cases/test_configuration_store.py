"""Unit tests for the configuration store."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from geo_redirect.adapters.outbound.key_value_store import InMemoryKeyValueStore, RedisKeyValueStore
from geo_redirect.application.use_cases.configuration_store import (
    CONFIG_KEY,
    ConfigurationStore,
)
from geo_redirect.domain.exceptions import StorageError, ValidationError

FROM_URL = (
    "geo_redirect.adapters.outbound.key_value_store.redis_key_value_store.aioredis.from_url"
)


@pytest.fixture
def config_store(memory_store, test_settings, fake_clock):
    """Create configuration store over an in-memory store."""
    return ConfigurationStore(
        memory_store,
        defaults_factory=test_settings.default_redirect_configuration,
        cache_ttl_seconds=300,
        clock=fake_clock,
    )


@pytest.mark.asyncio
async def test_get_config_returns_defaults_when_nothing_stored(config_store, default_config, memory_store):
    """Test defaults are served but not persisted when the store is empty."""
    config = await config_store.get_config()

    assert config == default_config
    assert await memory_store.get(CONFIG_KEY) is None


@pytest.mark.asyncio
async def test_update_persists_and_survives_cache_clear(config_store, memory_store):
    """Test an accepted update is read back from storage after clearing the cache."""
    await config_store.update_config({"turkey_destination_number": "905559998877"})
    await config_store.clear_cache()

    config = await config_store.get_config()

    assert config.turkey_destination_number == "905559998877"
    stored = json.loads(await memory_store.get(CONFIG_KEY))
    assert stored["turkey_destination_number"] == "905559998877"


@pytest.mark.asyncio
async def test_invalid_update_keeps_previous_record(config_store):
    """Test a rejected update changes nothing and lists every field."""
    before = await config_store.update_config({"turkey_text": "Selam"})

    with pytest.raises(ValidationError) as exc_info:
        await config_store.update_config(
            {"default_destination_number": "0123", "redirect_delay_ms": 30001}
        )

    assert exc_info.value.fields == ["default_destination_number", "redirect_delay_ms"]
    await config_store.clear_cache()
    assert await config_store.get_config() == before


@pytest.mark.asyncio
async def test_update_normalizes_values(config_store):
    """Test accepted values are stored in normalized form."""
    config = await config_store.update_config(
        {
            "default_destination_number": "+1 (555) 000-1111",
            "redirect_presentation_mode": "DELAYED",
            "redirect_delay_ms": "2500",
        }
    )

    assert config.default_destination_number == "15550001111"
    assert config.redirect_presentation_mode == "delayed"
    assert config.redirect_delay_ms == 2500


@pytest.mark.asyncio
async def test_empty_update_repersists_current_record(config_store, memory_store, default_config):
    """Test an empty update writes the unchanged record."""
    config = await config_store.update_config({})

    assert config == default_config
    assert await memory_store.get(CONFIG_KEY) is not None


@pytest.mark.asyncio
async def test_reset_restores_defaults_and_is_idempotent(config_store, default_config):
    """Test reset replaces the record with defaults, twice in a row."""
    await config_store.update_config({"turkey_text": "Selam"})

    first = await config_store.reset_config()
    second = await config_store.reset_config()

    assert first == default_config
    assert second == default_config
    await config_store.clear_cache()
    assert await config_store.get_config() == default_config


@pytest.mark.asyncio
async def test_unreadable_stored_record_falls_back_to_defaults(config_store, memory_store, default_config):
    """Test corrupt JSON in storage is treated as missing."""
    await memory_store.set(CONFIG_KEY, "{not json")

    assert await config_store.get_config() == default_config


@pytest.mark.asyncio
async def test_partial_stored_record_is_completed_from_defaults(config_store, memory_store, default_config):
    """Test missing fields in a stored record come from defaults."""
    await memory_store.set(CONFIG_KEY, json.dumps({"turkey_text": "Selam"}))

    config = await config_store.get_config()

    assert config.turkey_text == "Selam"
    assert config.default_website_url == default_config.default_website_url


@pytest.mark.asyncio
async def test_cached_snapshot_is_served_while_fresh(config_store, memory_store, fake_clock):
    """Test out-of-band storage changes are seen only after the cache expires."""
    await config_store.get_config()
    await memory_store.set(CONFIG_KEY, json.dumps({"turkey_text": "Changed elsewhere"}))

    fake_clock.advance(299)
    assert (await config_store.get_config()).turkey_text == "Merhaba!"

    fake_clock.advance(1)
    assert (await config_store.get_config()).turkey_text == "Changed elsewhere"


@pytest.mark.asyncio
async def test_failed_persist_raises_storage_error(test_settings, default_config):
    """Test a failed durable write raises and leaves the cache untouched."""
    store = AsyncMock()
    store.get = AsyncMock(return_value=None)
    store.set = AsyncMock(return_value=False)
    config_store = ConfigurationStore(
        store, defaults_factory=test_settings.default_redirect_configuration
    )

    with pytest.raises(StorageError):
        await config_store.update_config({"turkey_text": "Selam"})

    assert await config_store.get_config() == default_config


@pytest.mark.asyncio
async def test_rejected_write_on_failing_redis_does_not_take_effect(test_settings, default_config):
    """Test a record refused by a failing Redis write is never served afterwards."""
    redis_client = AsyncMock()
    redis_client.ping = AsyncMock(return_value=True)
    redis_client.get = AsyncMock(return_value=None)
    redis_client.set = AsyncMock(side_effect=RedisConnectionError("connection reset"))
    store = RedisKeyValueStore("redis://localhost:6379/0", max_reconnect_attempts=0)
    config_store = ConfigurationStore(
        store, defaults_factory=test_settings.default_redirect_configuration
    )

    with patch(FROM_URL, new_callable=AsyncMock) as mock_from_url:
        mock_from_url.return_value = redis_client

        with pytest.raises(StorageError):
            await config_store.update_config({"turkey_text": "REJECTED"})

        assert (await config_store.get_config()).turkey_text == default_config.turkey_text
        await config_store.clear_cache()
        assert (await config_store.get_config()).turkey_text == default_config.turkey_text
        assert await store.fallback.get(CONFIG_KEY) is None


@pytest.mark.asyncio
async def test_get_value_and_set_value(config_store):
    """Test single-field accessors."""
    await config_store.set_value("redirect_message", "One moment...")

    assert await config_store.get_value("redirect_message") == "One moment..."
    assert await config_store.get_value("no_such_field") is None


@pytest.mark.asyncio
async def test_health_check_reports_fields(config_store):
    """Test health check reports storage and field presence."""
    health = await config_store.health_check()

    assert health["status"] == "healthy"
    assert health["storage"]["type"] == "memory"
    assert health["config"]["has_default_destination_number"] is True
    assert "turkey_website_url" in health["config"]["keys"]


@pytest.mark.asyncio
async def test_configuration_survives_across_store_instances(test_settings):
    """Test a second store over the same backend sees persisted changes."""
    backend = InMemoryKeyValueStore()
    writer = ConfigurationStore(backend, test_settings.default_redirect_configuration)
    reader = ConfigurationStore(backend, test_settings.default_redirect_configuration)

    await writer.update_config({"default_channel_name": "new_channel"})

    assert (await reader.get_config()).default_channel_name == "new_channel"

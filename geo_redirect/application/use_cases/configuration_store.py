"""Configuration store with short-lived in-process caching."""

import json
import logging
import time
from typing import Any, Callable, Mapping, Optional

from geo_redirect.application.ports.key_value_store import KeyValueStore
from geo_redirect.domain.entities.redirect_configuration import RedirectConfiguration
from geo_redirect.domain.exceptions import StorageError, ValidationError
from geo_redirect.domain.services.configuration_validation import (
    Invalid,
    validate_configuration,
)
from geo_redirect.infrastructure.logging.logger import log_config

CONFIG_KEY = "redirect_config"
DEFAULT_CACHE_TTL_SECONDS = 300


class ConfigurationStore:
    """Holds the redirect configuration record (cache-aside over a key-value store).

    The cached snapshot is an immutable record whose reference is swapped on
    write. Concurrent writers are last-writer-wins with no conflict detection.
    """

    def __init__(
        self,
        key_value_store: KeyValueStore,
        defaults_factory: Callable[[], RedirectConfiguration],
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize configuration store.

        Args:
            key_value_store: Store holding the serialized record
            defaults_factory: Builds the environment-level default record
            cache_ttl_seconds: Freshness window for the in-process snapshot
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._store = key_value_store
        self._defaults_factory = defaults_factory
        self._cache_ttl_seconds = cache_ttl_seconds
        self._clock = clock
        self._cached_config: Optional[RedirectConfiguration] = None
        self._cached_at = 0.0

    def _cache(self, config: RedirectConfiguration) -> None:
        self._cached_config = config
        self._cached_at = self._clock()

    def _is_cache_fresh(self) -> bool:
        return (
            self._cached_config is not None
            and self._clock() - self._cached_at < self._cache_ttl_seconds
        )

    def _deserialize(self, stored: str) -> Optional[RedirectConfiguration]:
        """Parse a stored record, filling missing fields from defaults."""
        try:
            data = json.loads(stored)
            if not isinstance(data, dict):
                raise ValueError("stored configuration is not an object")
            return RedirectConfiguration.from_mapping(data, self._defaults_factory())
        except (ValueError, TypeError) as e:
            log_config("stored_config_unreadable", level=logging.ERROR, error=str(e))
            return None

    async def get_config(self) -> RedirectConfiguration:
        """
        Get the current configuration.

        Serves the in-process snapshot while fresh, then the stored record,
        then the environment-level defaults.

        Returns:
            Fully populated configuration record
        """
        if self._is_cache_fresh():
            log_config("config_cache_hit", level=logging.DEBUG)
            return self._cached_config

        stored = await self._store.get(CONFIG_KEY)
        if stored:
            config = self._deserialize(stored)
            if config is not None:
                self._cache(config)
                log_config("config_loaded_from_storage")
                return config

        config = self._defaults_factory()
        self._cache(config)
        log_config("config_using_defaults")
        return config

    async def set_config(self, new_config: Any) -> RedirectConfiguration:
        """
        Validate and persist a complete configuration record.

        Args:
            new_config: RedirectConfiguration or mapping of every field

        Returns:
            The validated, normalized record

        Raises:
            ValidationError: Listing every violated field; nothing is written
            StorageError: If the durable backend failed during the write
        """
        data = new_config.to_dict() if isinstance(new_config, RedirectConfiguration) else new_config

        result = validate_configuration(data)
        if isinstance(result, Invalid):
            error = ValidationError(result.errors)
            log_config("config_rejected", level=logging.WARNING, fields=error.fields)
            raise error

        config = result.configuration
        persisted = await self._store.set(CONFIG_KEY, json.dumps(config.to_dict(), sort_keys=True))
        if not persisted:
            log_config("config_persist_failed", level=logging.ERROR)
            raise StorageError("Failed to save configuration")

        self._cache(config)
        log_config(
            "config_updated",
            default_destination_number=config.default_destination_number,
            turkey_destination_number=config.turkey_destination_number,
        )
        return config

    async def update_config(self, updates: Mapping[str, Any]) -> RedirectConfiguration:
        """
        Merge a partial update over the current record and persist it.

        An empty update re-validates and re-persists the unchanged record.

        Args:
            updates: Field values to change

        Returns:
            The validated, normalized record
        """
        current = await self.get_config()
        return await self.set_config(current.merged_with(updates))

    async def reset_config(self) -> RedirectConfiguration:
        """Replace the whole record with environment-level defaults."""
        config = await self.set_config(self._defaults_factory())
        log_config("config_reset")
        return config

    async def clear_cache(self) -> None:
        """Drop the in-process snapshot so the next read hits the store."""
        self._cached_config = None
        self._cached_at = 0.0
        log_config("config_cache_cleared")

    async def get_value(self, field: str) -> Any:
        """Get a single configuration field, or None for unknown fields."""
        config = await self.get_config()
        return getattr(config, field, None)

    async def set_value(self, field: str, value: Any) -> RedirectConfiguration:
        """Change a single configuration field."""
        return await self.update_config({field: value})

    async def health_check(self) -> dict[str, Any]:
        """
        Report configuration store health.

        Returns:
            Status, storage health and which configuration fields are present
        """
        storage_health = await self._store.health_check()
        config = await self.get_config()
        values = config.to_dict()

        return {
            "status": "healthy",
            "storage": storage_health,
            "config": {
                **{f"has_{name}": bool(value) for name, value in values.items()},
                "keys": list(values),
            },
        }

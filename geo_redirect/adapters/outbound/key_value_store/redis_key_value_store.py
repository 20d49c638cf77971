"""Redis key-value store adapter with in-memory fallback."""

import asyncio
import logging
from typing import Any, Optional

from redis import asyncio as aioredis
from redis.exceptions import RedisError

from geo_redirect.adapters.outbound.key_value_store.in_memory_key_value_store import (
    InMemoryKeyValueStore,
)
from geo_redirect.application.ports.key_value_store import KeyValueStore
from geo_redirect.infrastructure.logging.logger import log_storage

_BACKEND_ERRORS = (RedisError, OSError, asyncio.TimeoutError)


class RedisKeyValueStore(KeyValueStore):
    """Redis adapter that degrades to an in-process mapping.

    Backend errors never reach callers: every operation falls back to the
    in-memory store and a bounded background reconnection is started.
    Entries written to the fallback are not migrated back to Redis.
    """

    def __init__(
        self,
        redis_url: Optional[str],
        fallback: Optional[InMemoryKeyValueStore] = None,
        max_reconnect_attempts: int = 3,
        reconnect_interval_seconds: float = 5.0,
        connect_timeout_seconds: float = 5.0,
    ) -> None:
        """
        Initialize Redis key-value store.

        Args:
            redis_url: Redis connection URL; empty or None forces fallback mode
            fallback: In-memory store used while Redis is unavailable
            max_reconnect_attempts: Reconnection attempts per outage
            reconnect_interval_seconds: Delay between reconnection attempts
            connect_timeout_seconds: Socket connect/read timeout
        """
        self._redis_url = redis_url or None
        self._fallback = fallback if fallback is not None else InMemoryKeyValueStore()
        self._max_reconnect_attempts = max_reconnect_attempts
        self._reconnect_interval = reconnect_interval_seconds
        self._connect_timeout = connect_timeout_seconds
        self._client: Optional[aioredis.Redis] = None
        self._connected = False
        self._initialized = False
        self._reconnect_task: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        """Check if operations are currently served by Redis."""
        return self._connected

    @property
    def fallback(self) -> InMemoryKeyValueStore:
        """Get the in-memory fallback store."""
        return self._fallback

    async def _get_client(self) -> aioredis.Redis:
        """
        Get or create Redis client.

        Returns:
            Redis client instance
        """
        if self._client is None:
            self._client = await aioredis.from_url(
                self._redis_url,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=self._connect_timeout,
                socket_timeout=self._connect_timeout,
            )
        return self._client

    async def connect(self) -> bool:
        """
        Connect to Redis and verify it with a PING.

        Returns:
            True if Redis is in use, False if running on the fallback
        """
        self._initialized = True

        if not self._redis_url:
            log_storage(
                "redis_url_not_set",
                level=logging.WARNING,
                message="Using in-memory fallback storage",
            )
            return False

        try:
            client = await self._get_client()
            await client.ping()
        except _BACKEND_ERRORS as e:
            self._connected = False
            log_storage("redis_connect_failed", level=logging.ERROR, error=str(e))
            self._schedule_reconnect()
            return False

        self._connected = True
        log_storage("redis_connected")
        return True

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.connect()

    def _degrade(self, operation: str, key: Optional[str], error: Exception) -> None:
        """Switch to the fallback after a backend failure."""
        self._connected = False
        log_storage(
            "redis_operation_failed",
            level=logging.WARNING,
            operation=operation,
            key=key,
            error=str(error),
            message="Serving from memory fallback",
        )
        self._schedule_reconnect()

    def _schedule_reconnect(self) -> None:
        if not self._redis_url or self._max_reconnect_attempts <= 0:
            return
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        """Retry PING until Redis answers or attempts run out."""
        for attempt in range(1, self._max_reconnect_attempts + 1):
            await asyncio.sleep(self._reconnect_interval)
            log_storage("redis_reconnecting", attempt=attempt)
            try:
                client = await self._get_client()
                await client.ping()
            except _BACKEND_ERRORS as e:
                log_storage(
                    "redis_reconnect_failed",
                    level=logging.WARNING,
                    attempt=attempt,
                    error=str(e),
                )
                continue

            self._connected = True
            log_storage("redis_reconnected", attempt=attempt)
            return

        log_storage(
            "redis_reconnect_exhausted",
            level=logging.ERROR,
            attempts=self._max_reconnect_attempts,
            message="Staying on memory fallback",
        )

    async def get(self, key: str) -> Optional[str]:
        """Get a value from Redis, or from the fallback when degraded."""
        await self._ensure_initialized()

        if self._connected:
            try:
                client = await self._get_client()
                value = await client.get(key)
                log_storage("redis_get", level=logging.DEBUG, key=key, hit=value is not None)
                return value
            except _BACKEND_ERRORS as e:
                self._degrade("get", key, e)

        value = await self._fallback.get(key)
        log_storage("memory_get", level=logging.DEBUG, key=key, hit=value is not None)
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        """
        Store a value in Redis, or in the fallback when degraded.

        Returns:
            False only when Redis appeared connected but the write failed;
            the value is then written nowhere
        """
        await self._ensure_initialized()

        if self._connected:
            try:
                client = await self._get_client()
                if ttl_seconds:
                    await client.setex(key, ttl_seconds, value)
                else:
                    await client.set(key, value)
                log_storage("redis_set", level=logging.DEBUG, key=key, ttl=ttl_seconds)
                return True
            except _BACKEND_ERRORS as e:
                self._degrade("set", key, e)
                return False

        await self._fallback.set(key, value, ttl_seconds)
        log_storage("memory_set", level=logging.DEBUG, key=key, ttl=ttl_seconds)
        return True

    async def delete(self, key: str) -> bool:
        """Delete a key from Redis, or from the fallback when degraded."""
        await self._ensure_initialized()

        if self._connected:
            try:
                client = await self._get_client()
                await client.delete(key)
                log_storage("redis_delete", level=logging.DEBUG, key=key)
                return True
            except _BACKEND_ERRORS as e:
                self._degrade("delete", key, e)
                await self._fallback.delete(key)
                return False

        return await self._fallback.delete(key)

    async def exists(self, key: str) -> bool:
        """Check a key in Redis, or in the fallback when degraded."""
        await self._ensure_initialized()

        if self._connected:
            try:
                client = await self._get_client()
                return await client.exists(key) > 0
            except _BACKEND_ERRORS as e:
                self._degrade("exists", key, e)

        return await self._fallback.exists(key)

    async def health_check(self) -> dict[str, Any]:
        """
        Report store health.

        Returns:
            healthy/redis when PING answers, degraded/memory on the fallback,
            unhealthy/error with detail when the probe fails
        """
        await self._ensure_initialized()

        if self._connected:
            try:
                client = await self._get_client()
                pong = await client.ping()
                return {"status": "healthy", "type": "redis", "response": pong}
            except _BACKEND_ERRORS as e:
                self._degrade("ping", None, e)
                return {"status": "unhealthy", "type": "error", "error": str(e)}

        return {"status": "degraded", "type": "memory", "message": "Using memory fallback"}

    async def close(self) -> None:
        """Stop reconnection and close Redis connection."""
        if self._reconnect_task is not None and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        self._reconnect_task = None

        if self._client:
            try:
                await self._client.aclose()
            except _BACKEND_ERRORS as e:
                log_storage("redis_close_failed", level=logging.WARNING, error=str(e))
            self._client = None
        self._connected = False

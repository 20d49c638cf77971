"""In-process key-value store adapter."""

import asyncio
import time
from typing import Any, Callable, Optional

from geo_redirect.application.ports.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store with TTL support.

    Runs on a single event loop; no operation awaits between reading and
    writing the mapping, so no lock is needed.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize in-memory store.

        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._data: dict[str, tuple[str, Optional[float]]] = {}
        self._expiry_handles: dict[str, asyncio.TimerHandle] = {}

    def __len__(self) -> int:
        return len(self._data)

    async def get(self, key: str) -> Optional[str]:
        """Get a live value."""
        entry = self._data.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            self._remove(key)
            return None
        return value

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        """Store a value; a TTL schedules a deferred removal."""
        self._cancel_expiry(key)

        expires_at = None
        if ttl_seconds:
            expires_at = self._clock() + ttl_seconds
            loop = asyncio.get_running_loop()
            self._expiry_handles[key] = loop.call_later(
                ttl_seconds, self._expire, key, expires_at
            )

        self._data[key] = (value, expires_at)
        return True

    async def delete(self, key: str) -> bool:
        """Delete a key."""
        self._remove(key)
        return True

    async def exists(self, key: str) -> bool:
        """Check whether a key holds a live value."""
        return await self.get(key) is not None

    async def health_check(self) -> dict[str, Any]:
        """Report store health."""
        return {"status": "healthy", "type": "memory", "keys": len(self._data)}

    def clear(self) -> None:
        """Remove every key."""
        for handle in self._expiry_handles.values():
            handle.cancel()
        self._expiry_handles.clear()
        self._data.clear()

    def _expire(self, key: str, expires_at: float) -> None:
        # Only drop the entry this timer was scheduled for
        entry = self._data.get(key)
        if entry is not None and entry[1] == expires_at:
            self._data.pop(key, None)
            self._expiry_handles.pop(key, None)

    def _remove(self, key: str) -> None:
        self._cancel_expiry(key)
        self._data.pop(key, None)

    def _cancel_expiry(self, key: str) -> None:
        handle = self._expiry_handles.pop(key, None)
        if handle is not None:
            handle.cancel()

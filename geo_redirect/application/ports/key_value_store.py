"""Key-value store port."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """Port interface for a string key-value store with optional TTL."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get the value stored under a key.

        Args:
            key: Key to read

        Returns:
            Stored value, or None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> bool:
        """
        Store a value, optionally expiring after a TTL.

        Args:
            key: Key to write
            value: Value to store
            ttl_seconds: Time-to-live in seconds, or None to keep indefinitely

        Returns:
            True if the write reached the intended backend, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key.

        Args:
            key: Key to delete

        Returns:
            True if the delete reached the intended backend, False otherwise
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """
        Check whether a key holds a live value.

        Args:
            key: Key to check

        Returns:
            True if the key exists
        """
        pass

    @abstractmethod
    async def health_check(self) -> dict[str, Any]:
        """
        Report store health.

        Returns:
            Dictionary with at least "status" and "type"
        """
        pass

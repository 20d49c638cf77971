"""Key-value store outbound adapters."""

from geo_redirect.adapters.outbound.key_value_store.in_memory_key_value_store import (
    InMemoryKeyValueStore,
)
from geo_redirect.adapters.outbound.key_value_store.redis_key_value_store import (
    RedisKeyValueStore,
)

__all__ = [
    "InMemoryKeyValueStore",
    "RedisKeyValueStore",
]

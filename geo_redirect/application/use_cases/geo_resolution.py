"""Geo-resolution engine: client IP to country code."""

import ipaddress
import logging
import re
from typing import Any, Awaitable, Callable, Optional, Sequence

from pydantic import BaseModel

from geo_redirect.application.ports.geo_ip_provider import GeoIpProvider
from geo_redirect.application.ports.key_value_store import KeyValueStore
from geo_redirect.domain.value_objects.routing_decision import REST
from geo_redirect.infrastructure.logging.logger import log_geo

CACHE_KEY_PREFIX = "geo_"
DEFAULT_CACHE_TTL_SECONDS = 86400
HEALTH_CHECK_IP = "8.8.8.8"

_PRIVATE_IP_PATTERNS = [
    re.compile(r"^127\."),
    re.compile(r"^10\."),
    re.compile(r"^192\.168\."),
    re.compile(r"^172\.(1[6-9]|2[0-9]|3[0-1])\."),
    re.compile(r"^::1$"),
    re.compile(r"^fe80:", re.IGNORECASE),
    re.compile(r"^fc00:", re.IGNORECASE),
    re.compile(r"^fd00:", re.IGNORECASE),
]

Attempt = tuple[str, Callable[[], Awaitable[Optional[str]]]]


class GeoResolutionStats(BaseModel):
    """Geo-resolution statistics."""

    cache_hits: int = 0
    cache_misses: int = 0
    provider_resolutions: int = 0
    provider_failures: int = 0
    fallbacks: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate percentage."""
        total = self.cache_hits + self.cache_misses
        return (self.cache_hits / total * 100) if total > 0 else 0.0


def is_private_ip(ip: Optional[str]) -> bool:
    """Check if an address is empty, loopback, private or link-local."""
    if not ip:
        return True
    return any(pattern.match(ip) for pattern in _PRIVATE_IP_PATTERNS)


def is_valid_ip(ip: str) -> bool:
    """Check if text parses as an IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(ip)
    except ValueError:
        return False
    return True


async def first_successful(
    attempts: Sequence[Attempt],
    on_failure: Optional[Callable[[str, Exception], None]] = None,
) -> Optional[tuple[str, str]]:
    """
    Run attempts in order until one yields a non-empty answer.

    Args:
        attempts: (name, coroutine factory) pairs in priority order
        on_failure: Called with the attempt name and error when one raises

    Returns:
        (attempt name, answer) of the first success, or None if all failed
    """
    for name, attempt in attempts:
        try:
            result = await attempt()
        except Exception as e:
            if on_failure is not None:
                on_failure(name, e)
            continue
        if result:
            return name, result
    return None


class GeoResolutionService:
    """Resolve client IPs to country codes with caching and provider failover.

    resolve_country never raises; "REST" is the universal fallback value.
    """

    def __init__(
        self,
        key_value_store: KeyValueStore,
        providers: Sequence[GeoIpProvider],
        self_lookup: Optional[GeoIpProvider] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        """
        Initialize geo-resolution service.

        Args:
            key_value_store: Store for per-IP cache entries
            providers: External providers in failover order
            self_lookup: Provider queried without an IP when direct
                resolution is impossible; None disables it
            cache_ttl_seconds: TTL for cached country codes
        """
        self._store = key_value_store
        self._providers = list(providers)
        self._self_lookup = self_lookup
        self._cache_ttl_seconds = cache_ttl_seconds
        self._stats = GeoResolutionStats()

    @property
    def provider_names(self) -> list[str]:
        """Get provider names in failover order."""
        return [provider.name for provider in self._providers]

    @property
    def cache_ttl_seconds(self) -> int:
        """Get cache TTL in seconds."""
        return self._cache_ttl_seconds

    def get_stats(self) -> GeoResolutionStats:
        """Get a copy of resolution statistics."""
        return self._stats.model_copy()

    @staticmethod
    def cache_key(ip: str) -> str:
        """Make cache key for an address (raw text, not normalized)."""
        return f"{CACHE_KEY_PREFIX}{ip}"

    async def resolve_country(self, ip: Optional[str]) -> str:
        """
        Resolve a client IP to a country code.

        Args:
            ip: Client address as extracted from the request

        Returns:
            Country code, or "REST" when it cannot be determined
        """
        try:
            if is_private_ip(ip) or not is_valid_ip(ip):
                log_geo("non_routable_ip", level=logging.DEBUG, ip=ip)
                return await self.fallback_country()

            cached = await self._get_cached_country(ip)
            if cached:
                return cached

            resolved = await first_successful(
                [(provider.name, self._lookup_with(provider, ip)) for provider in self._providers],
                on_failure=lambda name, error: self._record_provider_failure(name, ip, error),
            )
            if resolved is not None:
                provider_name, country = resolved
                self._stats.provider_resolutions += 1
                await self._cache_country(ip, country)
                log_geo("resolved", ip=ip, country=country, provider=provider_name)
                return country

            log_geo("all_providers_failed", level=logging.WARNING, ip=ip)
            return await self.fallback_country()
        except Exception as e:
            log_geo("resolution_error", level=logging.ERROR, ip=ip, error=str(e))
            return await self.fallback_country()

    @staticmethod
    def _lookup_with(provider: GeoIpProvider, ip: str) -> Callable[[], Awaitable[Optional[str]]]:
        async def attempt() -> Optional[str]:
            return await provider.lookup(ip)

        return attempt

    def _record_provider_failure(self, name: str, ip: str, error: Exception) -> None:
        self._stats.provider_failures += 1
        log_geo("provider_failed", level=logging.WARNING, provider=name, ip=ip, error=str(error))

    async def _get_cached_country(self, ip: str) -> Optional[str]:
        try:
            cached = await self._store.get(self.cache_key(ip))
        except Exception as e:
            log_geo("cache_read_failed", level=logging.ERROR, ip=ip, error=str(e))
            cached = None

        if cached:
            self._stats.cache_hits += 1
            log_geo("cache_hit", level=logging.DEBUG, ip=ip, country=cached)
            return cached

        self._stats.cache_misses += 1
        return None

    async def _cache_country(self, ip: str, country: str) -> None:
        try:
            await self._store.set(self.cache_key(ip), country, self._cache_ttl_seconds)
            log_geo("cached", level=logging.DEBUG, ip=ip, country=country, ttl=self._cache_ttl_seconds)
        except Exception as e:
            log_geo("cache_write_failed", level=logging.ERROR, ip=ip, error=str(e))

    async def fallback_country(self) -> str:
        """
        Approximate the location from the server's own egress address.

        Returns:
            Country code from the self-lookup, or "REST"
        """
        self._stats.fallbacks += 1

        if self._self_lookup is None:
            log_geo("no_self_lookup", level=logging.DEBUG, result=REST)
            return REST

        resolved = await first_successful(
            [(self._self_lookup.name, self._self_lookup.lookup)],
            on_failure=lambda name, error: log_geo(
                "self_lookup_failed", level=logging.WARNING, provider=name, error=str(error)
            ),
        )
        if resolved is None:
            return REST

        _, country = resolved
        log_geo("fallback_resolved", country=country)
        return country

    async def health_check(self) -> dict[str, Any]:
        """
        Report engine health by resolving a well-known public address.

        Returns:
            Status, probe result, providers and cache TTL
        """
        country = await self.resolve_country(HEALTH_CHECK_IP)
        return {
            "status": "healthy",
            "test_ip": HEALTH_CHECK_IP,
            "result": country,
            "providers": self.provider_names,
            "cache_ttl": self._cache_ttl_seconds,
        }

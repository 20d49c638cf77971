"""Geo-IP provider port."""

from abc import ABC, abstractmethod
from typing import Optional


class GeoIpProvider(ABC):
    """Port interface for an external IP-to-country lookup."""

    name: str = "provider"

    @abstractmethod
    async def lookup(self, ip: Optional[str] = None) -> Optional[str]:
        """
        Resolve an IP address to a country code.

        Args:
            ip: Address to resolve, or None to look up the caller's own
                egress address

        Returns:
            Upper-case country code, or None if the provider had no answer

        Raises:
            GeoLookupError: If the request failed (timeout, non-2xx,
                malformed body, missing credential)
        """
        pass

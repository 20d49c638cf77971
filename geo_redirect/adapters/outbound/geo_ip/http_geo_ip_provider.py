"""HTTP geo-IP provider adapters."""

import asyncio
import logging
from typing import Any, Callable, Optional

import httpx

from geo_redirect.application.ports.geo_ip_provider import GeoIpProvider
from geo_redirect.domain.exceptions import GeoLookupError
from geo_redirect.infrastructure.logging.logger import log_geo

USER_AGENT = "Geo-Redirect/2.0"
DEFAULT_TIMEOUT_MS = 3000

ResponseParser = Callable[[httpx.Response], Optional[str]]


def normalize_country_code(value: Any) -> Optional[str]:
    """Upper-case and trim a country code; empty means no answer."""
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    return code or None


def json_field_parser(field: str) -> ResponseParser:
    """
    Build a parser reading one field of a JSON object body.

    Args:
        field: Name of the field holding the country code

    Returns:
        Parser raising ValueError on a malformed body
    """

    def parse(response: httpx.Response) -> Optional[str]:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("expected a JSON object")
        return normalize_country_code(data.get(field))

    return parse


def plain_text_parser(response: httpx.Response) -> Optional[str]:
    """Read the whole body as the country code."""
    return normalize_country_code(response.text)


class HttpGeoIpProvider(GeoIpProvider):
    """Geo-IP provider reached with a single HTTP GET."""

    def __init__(
        self,
        name: str,
        url_template: str,
        parser: ResponseParser,
        http_client: httpx.AsyncClient,
        token: Optional[str] = None,
        requires_token: bool = False,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """
        Initialize HTTP geo-IP provider.

        Args:
            name: Provider name used in logs
            url_template: URL with {ip} and optional {token} placeholders
            parser: Extracts the country code from a successful response
            http_client: Shared async HTTP client
            token: Credential substituted into the URL
            requires_token: Fail fast when no token is configured
            timeout_ms: Per-request timeout in milliseconds
        """
        self.name = name
        self._url_template = url_template
        self._parser = parser
        self._http_client = http_client
        self._token = token or None
        self._requires_token = requires_token
        self._timeout_ms = timeout_ms

    @property
    def timeout_ms(self) -> int:
        """Get per-request timeout in milliseconds."""
        return self._timeout_ms

    def _build_url(self, ip: Optional[str]) -> str:
        return self._url_template.format(ip=ip or "", token=self._token or "")

    async def lookup(self, ip: Optional[str] = None) -> Optional[str]:
        """Resolve an address; see GeoIpProvider.lookup."""
        if self._requires_token and not self._token:
            raise GeoLookupError(self.name, "token not configured")

        log_geo("provider_request", level=logging.DEBUG, provider=self.name, ip=ip)

        try:
            response = await asyncio.wait_for(
                self._http_client.get(self._build_url(ip), headers={"User-Agent": USER_AGENT}),
                timeout=self._timeout_ms / 1000,
            )
        except asyncio.TimeoutError:
            raise GeoLookupError(self.name, f"timeout after {self._timeout_ms} ms") from None
        except httpx.HTTPError as e:
            raise GeoLookupError(self.name, f"request failed: {e}") from e

        if not response.is_success:
            raise GeoLookupError(self.name, f"HTTP {response.status_code}")

        try:
            country = self._parser(response)
        except ValueError as e:
            raise GeoLookupError(self.name, f"malformed response: {e}") from e

        log_geo("provider_response", level=logging.DEBUG, provider=self.name, ip=ip, country=country)
        return country


def create_ipinfo_provider(
    http_client: httpx.AsyncClient, token: Optional[str], timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> HttpGeoIpProvider:
    """ipinfo.io lookup; JSON body, field "country"."""
    return HttpGeoIpProvider(
        name="ipinfo",
        url_template="https://ipinfo.io/{ip}?token={token}",
        parser=json_field_parser("country"),
        http_client=http_client,
        token=token,
        requires_token=True,
        timeout_ms=timeout_ms,
    )


def create_ipapi_provider(
    http_client: httpx.AsyncClient, timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> HttpGeoIpProvider:
    """ipapi.co lookup; plain-text body."""
    return HttpGeoIpProvider(
        name="ipapi",
        url_template="https://ipapi.co/{ip}/country/",
        parser=plain_text_parser,
        http_client=http_client,
        timeout_ms=timeout_ms,
    )


def create_ip_api_provider(
    http_client: httpx.AsyncClient, timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> HttpGeoIpProvider:
    """ip-api.com lookup; JSON body, field "countryCode"."""
    return HttpGeoIpProvider(
        name="ip-api",
        url_template="http://ip-api.com/json/{ip}?fields=countryCode",
        parser=json_field_parser("countryCode"),
        http_client=http_client,
        timeout_ms=timeout_ms,
    )


def create_ipinfo_self_lookup(
    http_client: httpx.AsyncClient, token: Optional[str], timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> HttpGeoIpProvider:
    """ipinfo.io lookup of the server's own egress address."""
    return HttpGeoIpProvider(
        name="ipinfo-self",
        url_template="https://ipinfo.io/json?token={token}",
        parser=json_field_parser("country"),
        http_client=http_client,
        token=token,
        requires_token=True,
        timeout_ms=timeout_ms,
    )

"""Geo-IP provider outbound adapters."""

from geo_redirect.adapters.outbound.geo_ip.http_geo_ip_provider import (
    HttpGeoIpProvider,
    create_ip_api_provider,
    create_ipapi_provider,
    create_ipinfo_provider,
    create_ipinfo_self_lookup,
)

__all__ = [
    "HttpGeoIpProvider",
    "create_ip_api_provider",
    "create_ipapi_provider",
    "create_ipinfo_provider",
    "create_ipinfo_self_lookup",
]

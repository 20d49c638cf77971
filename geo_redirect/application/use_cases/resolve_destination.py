"""Resolve the redirect destination for an inbound request."""

from typing import Optional

from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.application.use_cases.geo_resolution import GeoResolutionService
from geo_redirect.domain.services.routing import determine_routing, select_destination
from geo_redirect.domain.value_objects.routing_decision import DestinationKind, RoutingDecision
from geo_redirect.infrastructure.logging.logger import log_geo


class ResolveDestinationUseCase:
    """Combine geo-resolution with the current configuration."""

    def __init__(
        self,
        geo_resolution_service: GeoResolutionService,
        configuration_store: ConfigurationStore,
    ) -> None:
        """
        Initialize use case.

        Args:
            geo_resolution_service: Resolves client IPs to countries
            configuration_store: Supplies destinations and texts
        """
        self._geo = geo_resolution_service
        self._configuration_store = configuration_store

    async def execute(
        self,
        client_ip: Optional[str],
        kind: DestinationKind,
        forced_country: Optional[str] = None,
        custom_text: Optional[str] = None,
    ) -> RoutingDecision:
        """
        Pick the destination for one request.

        A forced override skips the geo lookup entirely.

        Args:
            client_ip: Client address extracted from the request
            kind: Destination kind requested by the route
            forced_country: Request-time override (e.g. "TR")
            custom_text: Ad-hoc text to merge with the configured prefill

        Returns:
            RoutingDecision with destination and merged text
        """
        forced = (forced_country or "").strip().upper()
        if forced:
            country = forced
            log_geo("forced_country", forced=forced)
        else:
            country = await self._geo.resolve_country(client_ip)

        config = await self._configuration_store.get_config()
        routing = determine_routing(country, forced or None)
        return select_destination(routing, config, kind, custom_text)

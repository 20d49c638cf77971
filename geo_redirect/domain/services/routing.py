"""Routing decision and destination selection."""

from typing import Optional

from geo_redirect.domain.entities.redirect_configuration import RedirectConfiguration
from geo_redirect.domain.value_objects.routing_decision import (
    REST,
    TURKEY,
    DestinationKind,
    RoutingDecision,
)

# (turkey field, default field) per destination kind
_DESTINATION_FIELDS = {
    DestinationKind.MESSAGING_NUMBER: ("turkey_destination_number", "default_destination_number"),
    DestinationKind.CHANNEL_NAME: ("turkey_channel_name", "default_channel_name"),
    DestinationKind.WEBSITE_URL: ("turkey_website_url", "default_website_url"),
}

_TEXT_FIELDS = {
    DestinationKind.MESSAGING_NUMBER: ("turkey_text", "default_text"),
    DestinationKind.CHANNEL_NAME: ("turkey_channel_text", "default_channel_text"),
}


def determine_routing(country_code: Optional[str], forced_override: Optional[str] = None) -> str:
    """
    Classify a visitor into the Turkey or default branch.

    A forced override that is not blank wins over the resolved country
    entirely.

    Args:
        country_code: Resolved country code (may be empty or "REST")
        forced_override: Request-time override, case-insensitive

    Returns:
        "TR" or "REST"
    """
    forced = str(forced_override).strip().upper() if forced_override is not None else ""
    if forced:
        return TURKEY if forced == TURKEY else REST
    return TURKEY if country_code == TURKEY else REST


def merge_texts(*parts: Optional[str]) -> str:
    """Space-join the non-empty text parts and trim the result."""
    return " ".join(part for part in parts if part).strip()


def select_destination(
    routing: str,
    config: RedirectConfiguration,
    kind: DestinationKind,
    custom_text: Optional[str] = None,
) -> RoutingDecision:
    """
    Pick the configured destination and prefill text for a routing branch.

    Args:
        routing: "TR" or "REST"
        config: Current configuration snapshot
        kind: Destination kind requested by the calling route
        custom_text: Ad-hoc text supplied with the request

    Returns:
        RoutingDecision with destination and merged text
    """
    is_turkey = routing == TURKEY
    turkey_field, default_field = _DESTINATION_FIELDS[kind]
    destination = getattr(config, turkey_field if is_turkey else default_field)

    text = ""
    if kind in _TEXT_FIELDS:
        turkey_text_field, default_text_field = _TEXT_FIELDS[kind]
        prefill = getattr(config, turkey_text_field if is_turkey else default_text_field)
        text = merge_texts(prefill, custom_text)

    return RoutingDecision(routing=TURKEY if is_turkey else REST, destination=destination, text=text)

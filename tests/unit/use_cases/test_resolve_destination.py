"""Unit tests for the resolve-destination use case."""

import pytest

from geo_redirect.application.use_cases.configuration_store import ConfigurationStore
from geo_redirect.application.use_cases.geo_resolution import GeoResolutionService
from geo_redirect.application.use_cases.resolve_destination import ResolveDestinationUseCase
from geo_redirect.domain.value_objects.routing_decision import REST, TURKEY, DestinationKind


@pytest.fixture
def provider(make_provider):
    """Provider answering TR."""
    return make_provider("ipinfo", "TR")


@pytest.fixture
def use_case(memory_store, test_settings, provider):
    """Create use case over in-memory services."""
    geo = GeoResolutionService(memory_store, [provider])
    config_store = ConfigurationStore(memory_store, test_settings.default_redirect_configuration)
    return ResolveDestinationUseCase(geo, config_store)


@pytest.mark.asyncio
async def test_turkish_visitor_gets_turkey_destination(use_case):
    """Test a visitor resolved to TR gets the Turkey number and merged text."""
    decision = await use_case.execute(
        "85.34.78.112", DestinationKind.MESSAGING_NUMBER, custom_text="car"
    )

    assert decision.routing == TURKEY
    assert decision.destination == "905551234567"
    assert decision.text == "Merhaba! car"


@pytest.mark.asyncio
async def test_forced_override_skips_geo(use_case, provider):
    """Test a forced override routes without calling any provider."""
    decision = await use_case.execute(
        "85.34.78.112", DestinationKind.CHANNEL_NAME, forced_country="us"
    )

    assert decision.routing == REST
    assert decision.destination == "default_channel"
    assert provider.calls == []


@pytest.mark.asyncio
async def test_blank_override_falls_back_to_geo(use_case, provider):
    """Test a whitespace-only override is ignored and the country is resolved."""
    decision = await use_case.execute(
        "85.34.78.112", DestinationKind.MESSAGING_NUMBER, forced_country="   "
    )

    assert decision.routing == TURKEY
    assert provider.calls == ["85.34.78.112"]


@pytest.mark.asyncio
async def test_unresolvable_visitor_gets_default_destination(use_case):
    """Test a private address without self-lookup gets the default branch."""
    decision = await use_case.execute("127.0.0.1", DestinationKind.WEBSITE_URL)

    assert decision.routing == REST
    assert decision.destination == "https://example.com"
    assert decision.text == ""


@pytest.mark.asyncio
async def test_repeat_visitor_is_served_from_geo_cache(memory_store, test_settings, make_provider):
    """Test a US visitor gets the default branch and a repeat visit makes no provider call."""
    provider = make_provider("ipinfo", "US")
    geo = GeoResolutionService(memory_store, [provider])
    config_store = ConfigurationStore(memory_store, test_settings.default_redirect_configuration)
    use_case = ResolveDestinationUseCase(geo, config_store)

    first = await use_case.execute("8.8.8.8", DestinationKind.MESSAGING_NUMBER)
    second = await use_case.execute("8.8.8.8", DestinationKind.MESSAGING_NUMBER)

    assert first.routing == REST
    assert second.routing == REST
    assert provider.calls == ["8.8.8.8"]

"""Shared fixtures for unit tests."""

from typing import Callable, Optional

import pytest

from geo_redirect.adapters.outbound.key_value_store import InMemoryKeyValueStore
from geo_redirect.application.ports.geo_ip_provider import GeoIpProvider
from geo_redirect.domain.entities.redirect_configuration import RedirectConfiguration
from geo_redirect.domain.exceptions import GeoLookupError
from geo_redirect.infrastructure.config.settings import Settings

ADMIN_TOKEN = "test-admin-token-0123456789"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGeoIpProvider(GeoIpProvider):
    """Provider returning a fixed answer or raising, recording every call."""

    def __init__(
        self, name: str, country: Optional[str] = None, fail: bool = False
    ) -> None:
        self.name = name
        self.country = country
        self.fail = fail
        self.calls: list[Optional[str]] = []

    async def lookup(self, ip: Optional[str] = None) -> Optional[str]:
        self.calls.append(ip)
        if self.fail:
            raise GeoLookupError(self.name, "unavailable")
        return self.country


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def make_provider() -> Callable[..., FakeGeoIpProvider]:
    """Factory for fake geo-IP providers."""
    return FakeGeoIpProvider


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    """Create an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def test_settings() -> Settings:
    """Create settings isolated from the environment and .env file."""
    return Settings(
        _env_file=None,
        admin_token=ADMIN_TOKEN,
        ipinfo_token="",
        redis_url="",
        default_whatsapp_number="15551234567",
        turkey_whatsapp_number="905551234567",
        default_text="Hello!",
        turkey_text="Merhaba!",
        default_telegram_channel="default_channel",
        turkey_telegram_channel="turkey_channel",
        default_telegram_text="Hi from Telegram",
        turkey_telegram_text="Telegram merhaba",
        default_website_url="https://example.com",
        turkey_website_url="https://example.com.tr",
        default_redirect_type="immediate",
        redirect_delay=3000,
        redirect_message="Redirecting to our website...",
    )


@pytest.fixture
def default_config(test_settings) -> RedirectConfiguration:
    """Default configuration record built from test settings."""
    return test_settings.default_redirect_configuration()

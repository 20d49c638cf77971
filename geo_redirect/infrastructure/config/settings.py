"""Application settings."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from geo_redirect.domain.entities.redirect_configuration import RedirectConfiguration
from geo_redirect.domain.exceptions import ConfigurationError
from geo_redirect.domain.services.configuration_validation import (
    Invalid,
    validate_configuration,
)

MIN_ADMIN_TOKEN_LENGTH = 16


class Settings(BaseSettings):
    """Application configuration settings."""

    environment: str = "development"
    log_level: str = "INFO"

    # Environment-level defaults for the redirect configuration record
    default_whatsapp_number: str = "1234567890"
    turkey_whatsapp_number: str = "1234567890"
    default_text: str = "Hello! How can I help you?"
    turkey_text: str = "Merhaba! Size nasıl yardımcı olabilirim?"
    default_telegram_channel: str = "your_default_channel"
    turkey_telegram_channel: str = "your_turkey_channel"
    default_telegram_text: str = "Hello! How can I help you?"
    turkey_telegram_text: str = "Merhaba! Size nasıl yardımcı olabilirim?"
    default_website_url: str = "https://example.com"
    turkey_website_url: str = "https://turkey.example.com"
    default_redirect_type: str = "immediate"
    redirect_delay: int = 3000
    redirect_message: str = "Redirecting to our website..."

    # Security
    admin_token: str = ""

    # External services
    ipinfo_token: str = ""
    redis_url: str = ""  # Empty keeps the key-value store on the in-memory fallback
    redis_max_reconnect_attempts: int = 3
    redis_reconnect_interval_seconds: float = 5.0

    # Geo-location
    geo_cache_ttl: int = 86400  # 24 hours
    geo_timeout: Optional[int] = None  # ms; overrides per-provider timeout when set

    # Configuration store
    config_cache_ttl: int = 300  # 5 minutes

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore",
    )

    def default_redirect_configuration(self) -> RedirectConfiguration:
        """
        Build the built-in default configuration record.

        Returns:
            RedirectConfiguration derived from environment settings
        """
        return RedirectConfiguration(
            default_destination_number=self.default_whatsapp_number,
            turkey_destination_number=self.turkey_whatsapp_number,
            default_text=self.default_text,
            turkey_text=self.turkey_text,
            default_channel_name=self.default_telegram_channel,
            turkey_channel_name=self.turkey_telegram_channel,
            default_channel_text=self.default_telegram_text,
            turkey_channel_text=self.turkey_telegram_text,
            default_website_url=self.default_website_url,
            turkey_website_url=self.turkey_website_url,
            redirect_presentation_mode=self.default_redirect_type.lower(),
            redirect_delay_ms=self.redirect_delay,
            redirect_message=self.redirect_message,
        )

    def environment_status(self) -> dict[str, str]:
        """Get environment status without exposing secrets."""
        return {
            "REDIS_URL": "SET" if self.redis_url else "NOT SET",
            "ADMIN_TOKEN": "SET" if self.admin_token else "NOT SET",
            "IPINFO_TOKEN": "SET" if self.ipinfo_token else "NOT SET",
            "ENVIRONMENT": self.environment,
        }


def ensure_valid_startup_settings(settings: Settings) -> None:
    """
    Check settings the process cannot run without.

    Args:
        settings: Settings to check

    Raises:
        ConfigurationError: Listing every problem found
    """
    problems: list[str] = []

    if not settings.admin_token:
        problems.append("ADMIN_TOKEN is required")
    elif len(settings.admin_token) < MIN_ADMIN_TOKEN_LENGTH:
        problems.append(f"ADMIN_TOKEN must be at least {MIN_ADMIN_TOKEN_LENGTH} characters")

    result = validate_configuration(settings.default_redirect_configuration().to_dict())
    if isinstance(result, Invalid):
        problems.extend(f"default {error.field}: {error.message}" for error in result.errors)

    if problems:
        raise ConfigurationError(problems)


settings = Settings()

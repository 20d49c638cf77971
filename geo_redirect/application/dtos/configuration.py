"""Configuration DTOs."""

from typing import Any, Optional

from pydantic import ConfigDict

from geo_redirect.application.dtos.base import DTO


class ConfigurationUpdateRequest(DTO):
    """Partial configuration update; only fields that are sent are applied.

    Values are accepted as sent and checked by configuration validation, so
    every bad field is reported together.
    """

    default_destination_number: Optional[Any] = None
    turkey_destination_number: Optional[Any] = None
    default_text: Optional[Any] = None
    turkey_text: Optional[Any] = None
    default_channel_name: Optional[Any] = None
    turkey_channel_name: Optional[Any] = None
    default_channel_text: Optional[Any] = None
    turkey_channel_text: Optional[Any] = None
    default_website_url: Optional[Any] = None
    turkey_website_url: Optional[Any] = None
    redirect_presentation_mode: Optional[Any] = None
    redirect_delay_ms: Optional[Any] = None
    redirect_message: Optional[Any] = None

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "turkey_destination_number": "905551234567",
                "turkey_text": "Merhaba!",
                "redirect_presentation_mode": "delayed",
                "redirect_delay_ms": 3000,
            }
        },
    )

    def to_updates(self) -> dict[str, Any]:
        """Get only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class ConfigurationResponse(DTO):
    """Configuration read/write response."""

    success: bool = True
    message: Optional[str] = None
    config: dict[str, Any]
    environment: Optional[dict[str, Any]] = None

"""Shape validation for redirect configuration records."""

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from geo_redirect.domain.entities.redirect_configuration import (
    REDIRECT_PRESENTATION_MODES,
    RedirectConfiguration,
)
from geo_redirect.domain.value_objects.field_error import FieldError

PHONE_NUMBER_PATTERN = re.compile(r"^[1-9]\d{6,14}$")
CHANNEL_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{5,32}$")
WEBSITE_URL_PATTERN = re.compile(
    r"^https?://(?:[A-Za-z0-9-]+\.)+[A-Za-z]{2,}(?::\d{1,5})?(?:[/?#]\S*)?$"
)
MAX_TEXT_LENGTH = 1000
MIN_REDIRECT_DELAY_MS = 0
MAX_REDIRECT_DELAY_MS = 30000


@dataclass(frozen=True)
class Valid:
    """Validation succeeded with a normalized record."""

    configuration: RedirectConfiguration


@dataclass(frozen=True)
class Invalid:
    """Validation failed; every violation is listed."""

    errors: tuple[FieldError, ...]


ValidationResult = Union[Valid, Invalid]

# A check returns (normalized value, None) or (None, error message)
FieldCheck = Callable[[Any], tuple[Any, Optional[str]]]


def check_phone_number(value: Any) -> tuple[Any, Optional[str]]:
    """Strip formatting characters and check the E.164-like digit shape."""
    if not value or not isinstance(value, (str, int)) or isinstance(value, bool):
        return None, "number is required"
    digits = re.sub(r"\D", "", str(value))
    if not PHONE_NUMBER_PATTERN.match(digits):
        return None, "number must be 7-15 digits and not start with 0"
    return digits, None


def check_channel_name(value: Any) -> tuple[Any, Optional[str]]:
    """Check a channel name."""
    if not value or not isinstance(value, str):
        return None, "channel name is required"
    channel = value.strip()
    if not CHANNEL_NAME_PATTERN.match(channel):
        return None, "channel name must be 5-32 characters, alphanumeric and underscores only"
    return channel, None


def check_website_url(value: Any) -> tuple[Any, Optional[str]]:
    """Check an http(s) URL with a dotted host."""
    if not value or not isinstance(value, str):
        return None, "website URL is required"
    url = value.strip()
    if not WEBSITE_URL_PATTERN.match(url):
        return None, "website URL must be a valid http or https URL"
    return url, None


def check_text(value: Any) -> tuple[Any, Optional[str]]:
    """Check a free-form prefill text."""
    if value is None:
        return "", None
    if not isinstance(value, str):
        return None, "text must be a string"
    if len(value) > MAX_TEXT_LENGTH:
        return None, f"text must be at most {MAX_TEXT_LENGTH} characters"
    return value, None


def check_presentation_mode(value: Any) -> tuple[Any, Optional[str]]:
    """Normalize and check the website presentation mode."""
    if not isinstance(value, str) or value.strip().lower() not in REDIRECT_PRESENTATION_MODES:
        allowed = ", ".join(REDIRECT_PRESENTATION_MODES)
        return None, f"redirect presentation mode must be one of: {allowed}"
    return value.strip().lower(), None


def check_redirect_delay(value: Any) -> tuple[Any, Optional[str]]:
    """Check the delayed-redirect delay in milliseconds."""
    if isinstance(value, bool):
        return None, "redirect delay must be an integer"
    if isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
        value = int(value.strip())
    if not isinstance(value, int):
        return None, "redirect delay must be an integer"
    if not MIN_REDIRECT_DELAY_MS <= value <= MAX_REDIRECT_DELAY_MS:
        return (
            None,
            f"redirect delay must be between {MIN_REDIRECT_DELAY_MS} "
            f"and {MAX_REDIRECT_DELAY_MS} ms",
        )
    return value, None


def check_message(value: Any) -> tuple[Any, Optional[str]]:
    """Check the redirect page message."""
    if value is None:
        return "", None
    if not isinstance(value, str):
        return None, "redirect message must be a string"
    return value, None


FIELD_CHECKS: dict[str, FieldCheck] = {
    "default_destination_number": check_phone_number,
    "turkey_destination_number": check_phone_number,
    "default_channel_name": check_channel_name,
    "turkey_channel_name": check_channel_name,
    "default_website_url": check_website_url,
    "turkey_website_url": check_website_url,
    "default_text": check_text,
    "turkey_text": check_text,
    "default_channel_text": check_text,
    "turkey_channel_text": check_text,
    "redirect_presentation_mode": check_presentation_mode,
    "redirect_delay_ms": check_redirect_delay,
    "redirect_message": check_message,
}


def validate_configuration(data: Mapping[str, Any]) -> ValidationResult:
    """
    Validate a complete configuration record.

    Every field is checked; violations are aggregated rather than stopping
    at the first one.

    Args:
        data: Field values for the whole record

    Returns:
        Valid with the normalized record, or Invalid listing all violations
    """
    normalized: dict[str, Any] = {}
    errors: list[FieldError] = []

    for name in RedirectConfiguration.field_names():
        value, message = FIELD_CHECKS[name](data.get(name))
        if message is not None:
            errors.append(FieldError(field=name, message=message))
        else:
            normalized[name] = value

    if errors:
        return Invalid(errors=tuple(errors))
    return Valid(configuration=RedirectConfiguration(**normalized))

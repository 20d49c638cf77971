"""Domain exceptions."""

from typing import Iterable

from geo_redirect.domain.value_objects.field_error import FieldError


class GeoRedirectError(Exception):
    """Base class for service errors."""


class ValidationError(GeoRedirectError):
    """A configuration write failed shape validation."""

    def __init__(self, errors: Iterable[FieldError]) -> None:
        """
        Initialize validation error.

        Args:
            errors: Every field-level violation found in the record
        """
        self.errors = list(errors)
        details = ", ".join(f"{error.field}: {error.message}" for error in self.errors)
        super().__init__(f"Configuration validation failed: {details}")

    @property
    def fields(self) -> list[str]:
        """Get names of the offending fields."""
        return [error.field for error in self.errors]


class StorageError(GeoRedirectError):
    """The durable backend failed while persisting configuration."""


class ConfigurationError(GeoRedirectError):
    """Environment settings are unusable; the process must not start."""

    def __init__(self, problems: Iterable[str]) -> None:
        self.problems = list(problems)
        super().__init__(f"Configuration validation failed: {', '.join(self.problems)}")


class GeoLookupError(GeoRedirectError):
    """A single geo-IP provider could not resolve an address."""

    def __init__(self, provider: str, reason: str) -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")

"""Field-level validation error value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single violated field in a configuration record."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        """Get JSON-friendly representation."""
        return {"field": self.field, "message": self.message}

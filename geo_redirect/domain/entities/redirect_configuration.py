"""Redirect configuration entity."""

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

REDIRECT_PRESENTATION_MODES = ("immediate", "delayed", "custom")


@dataclass(frozen=True)
class RedirectConfiguration:
    """Routing destinations and texts for both visitor branches.

    Instances are immutable snapshots; updates produce a new record.
    """

    default_destination_number: str
    turkey_destination_number: str
    default_channel_name: str
    turkey_channel_name: str
    default_website_url: str
    turkey_website_url: str
    default_text: str = ""
    turkey_text: str = ""
    default_channel_text: str = ""
    turkey_channel_text: str = ""
    redirect_presentation_mode: str = "immediate"
    redirect_delay_ms: int = 3000
    redirect_message: str = ""

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        """Get record field names in declaration order."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], defaults: "RedirectConfiguration"
    ) -> "RedirectConfiguration":
        """
        Build a fully populated record from a possibly partial mapping.

        Unknown keys are ignored and missing keys are taken from defaults.

        Args:
            data: Field values (e.g. a deserialized stored record)
            defaults: Record supplying values for missing fields

        Returns:
            RedirectConfiguration with every field set
        """
        values = defaults.to_dict()
        for name in cls.field_names():
            if name in data and data[name] is not None:
                values[name] = data[name]
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Get dictionary representation."""
        return asdict(self)

    def merged_with(self, updates: Mapping[str, Any]) -> dict[str, Any]:
        """
        Shallow-merge updates over this record.

        The result is a plain mapping since the merged values are not yet
        validated.

        Args:
            updates: Field values to overlay

        Returns:
            Dictionary with this record's values overlaid by updates
        """
        merged = self.to_dict()
        merged.update(updates)
        return merged

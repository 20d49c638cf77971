"""Base DTO class."""

from pydantic import BaseModel, ConfigDict


class DTO(BaseModel):
    """Base class for application DTOs; immutable and strict about unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")

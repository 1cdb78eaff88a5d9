"""Channel definition validation."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from vtsync.core.schemas import Channel, FieldError, Platform


class ChannelDefinition(BaseModel):
    """Schema of a channel entry in an organization file."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)
    platform_id: Platform
    organization: str = Field(min_length=1)
    twitter: str | None = None


def validate_channel(entry: dict[str, Any]) -> list[FieldError]:
    """
    Validate a channel entry.

    Args:
        entry: Raw channel definition

    Returns:
        Field-level errors; empty when the entry is valid
    """
    try:
        ChannelDefinition.model_validate(entry)
    except ValidationError as e:
        return [
            FieldError(
                field=".".join(str(part) for part in err["loc"]) or "<root>",
                message=err["msg"],
            )
            for err in e.errors()
        ]
    return []


def to_channel(entry: dict[str, Any]) -> Channel:
    """Convert a valid channel entry to a storable Channel."""
    definition = ChannelDefinition.model_validate(entry)
    return Channel(
        channel_id=definition.channel_id,
        platform_id=definition.platform_id.value,
        name=definition.name,
        organization=definition.organization,
        twitter=definition.twitter,
    )

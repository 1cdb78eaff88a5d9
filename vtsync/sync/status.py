"""Lifecycle status derivation from streaming time facts."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from vtsync.core.schemas import VideoStatus


def derive_status(details: Mapping[str, Any] | None) -> VideoStatus:
    """
    Derive a video's lifecycle status from its streaming details.

    Args:
        details: The ``liveStreamingDetails`` block, or None when the API
            returned none (pre-recorded content)

    Returns:
        ``uploaded`` without details, otherwise ``ended`` if an end time is
        set, ``live`` if only a start time is set, else ``upcoming``
    """
    if details is None:
        return VideoStatus.UPLOADED
    if details.get("actualEndTime"):
        return VideoStatus.ENDED
    if details.get("actualStartTime"):
        return VideoStatus.LIVE
    return VideoStatus.UPCOMING


def parse_viewers(value: Any) -> int | None:
    """Parse a concurrent viewer count.

    Absent, unparsable and negative values mean "not reported" and yield
    None; a reported zero stays 0.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        viewers = int(value)
    except (TypeError, ValueError):
        return None
    return viewers if viewers >= 0 else None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an RFC 3339 API timestamp into an aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)

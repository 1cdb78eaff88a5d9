"""Ports the sync engine consumes: persistence, metadata fetch, scrapers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from vtsync.core.schemas import (
    Channel,
    ScrapeOutcome,
    UpdateResult,
    Video,
    VideoStatus,
    VideoUpdate,
)


@dataclass(frozen=True, slots=True)
class StaleVideoQuery:
    """Declarative selection of videos due for a status refresh.

    Matches videos of ``platform_id`` whose status is in ``statuses``, or
    whose status is ``upcoming`` with a scheduled start at or before
    ``upcoming_before``. Results are ordered by ``updated_at`` ascending and
    capped at ``limit``.
    """

    platform_id: str
    upcoming_before: datetime
    limit: int
    statuses: frozenset[VideoStatus] = field(
        default_factory=lambda: frozenset({VideoStatus.NEW, VideoStatus.LIVE})
    )

    def matches(self, video: Video) -> bool:
        if video.platform_id != self.platform_id:
            return False
        if video.status in self.statuses:
            return True
        scheduled = video.time.scheduled
        return (
            video.status == VideoStatus.UPCOMING
            and scheduled is not None
            and scheduled <= self.upcoming_before
        )


@runtime_checkable
class SyncStore(Protocol):
    """Persistence collaborator used by the engine."""

    async def find_videos(self, query: StaleVideoQuery) -> list[Video]: ...

    async def list_videos(self) -> list[Video]: ...

    async def existing_video_ids(self, video_ids: Iterable[str]) -> set[str]: ...

    async def insert_videos(self, videos: Sequence[Video]) -> int: ...

    async def update_videos(self, updates: Sequence[VideoUpdate]) -> int: ...

    async def list_channels(self, uncrawled_only: bool = False) -> list[Channel]: ...

    async def insert_channels(self, channels: Sequence[Channel]) -> int: ...

    async def mark_crawled(self, channel: Channel, when: datetime) -> None: ...

    async def drop_collections(self) -> None: ...

    async def drop_database(self) -> None: ...


@runtime_checkable
class VideoFetcher(Protocol):
    """Batched external metadata fetch; returns raw API items."""

    async def __call__(
        self,
        video_ids: Sequence[str],
        *,
        part: str,
        fields: str,
    ) -> list[dict[str, Any]]: ...


@runtime_checkable
class PlatformUpdater(Protocol):
    """Refreshes stale videos of one platform."""

    async def __call__(self, videos: Sequence[Video]) -> UpdateResult: ...


@runtime_checkable
class ChannelScraper(Protocol):
    """Discovers historical videos of one channel."""

    async def __call__(self, channel: Channel) -> ScrapeOutcome: ...


__all__ = [
    "StaleVideoQuery",
    "SyncStore",
    "VideoFetcher",
    "PlatformUpdater",
    "ChannelScraper",
]

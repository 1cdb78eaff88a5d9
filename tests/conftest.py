"""Pytest fixtures for the sync engine tests.

This module provides:
- An in-memory store implementing the persistence port
- A scripted metadata fetcher
- Factories for videos, channels and raw API items
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from vtsync.core.exceptions import DatabaseError, FetchError
from vtsync.core.schemas import Channel, Video, VideoStatus, VideoTime, VideoUpdate, utcnow
from vtsync.sync.ports import StaleVideoQuery

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Fakes
# =============================================================================


class InMemoryStore:
    """Store port backed by dicts; records writes for assertions."""

    def __init__(
        self,
        videos: Iterable[Video] = (),
        channels: Iterable[Channel] = (),
    ) -> None:
        self.videos: dict[str, Video] = {v.video_id: v for v in videos}
        self.channels: list[Channel] = list(channels)
        self.queries: list[StaleVideoQuery] = []
        self.updates: list[VideoUpdate] = []
        self.failing_files: set[str] = set()
        self.dropped: list[str] = []

    async def find_videos(self, query: StaleVideoQuery) -> list[Video]:
        self.queries.append(query)
        matched = [v for v in self.videos.values() if query.matches(v)]
        matched.sort(key=lambda v: v.updated_at)
        return matched[: query.limit]

    async def list_videos(self) -> list[Video]:
        return list(self.videos.values())

    async def existing_video_ids(self, video_ids: Iterable[str]) -> set[str]:
        return {video_id for video_id in video_ids if video_id in self.videos}

    async def insert_videos(self, videos: Sequence[Video]) -> int:
        inserted = 0
        for video in videos:
            if video.video_id not in self.videos:
                self.videos[video.video_id] = video
                inserted += 1
        return inserted

    async def update_videos(self, updates: Sequence[VideoUpdate]) -> int:
        matched = 0
        for update in updates:
            self.updates.append(update)
            current = self.videos.get(update.video_id)
            if current is None:
                continue
            data = {**current.model_dump(), **update.changes(), "updated_at": utcnow()}
            self.videos[update.video_id] = Video.model_validate(data)
            matched += 1
        return matched

    async def list_channels(self, uncrawled_only: bool = False) -> list[Channel]:
        if uncrawled_only:
            return [c for c in self.channels if c.crawled_at is None]
        return list(self.channels)

    async def insert_channels(self, channels: Sequence[Channel]) -> int:
        if any(c.organization in self.failing_files for c in channels):
            raise DatabaseError("E11000 duplicate key error")
        self.channels.extend(channels)
        return len(channels)

    async def mark_crawled(self, channel: Channel, when: datetime) -> None:
        self.channels = [
            c.model_copy(update={"crawled_at": when})
            if (c.channel_id, c.platform_id) == (channel.channel_id, channel.platform_id)
            else c
            for c in self.channels
        ]

    async def drop_collections(self) -> None:
        self.dropped.append("collections")

    async def drop_database(self) -> None:
        self.dropped.append("database")


class FakeFetcher:
    """Metadata fetch returning canned items for known ids."""

    def __init__(self, items: Iterable[dict[str, Any]] = (), error: Exception | None = None):
        self.items = {item["id"]: item for item in items}
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def __call__(
        self, video_ids: Sequence[str], *, part: str, fields: str
    ) -> list[dict[str, Any]]:
        self.calls.append({"ids": list(video_ids), "part": part, "fields": fields})
        if self.error is not None:
            raise self.error
        return [self.items[video_id] for video_id in video_ids if video_id in self.items]


# =============================================================================
# Factories
# =============================================================================


def _make_video(
    video_id: str,
    status: VideoStatus = VideoStatus.NEW,
    updated_at: datetime = NOW,
    scheduled: datetime | None = None,
    platform_id: str = "yt",
    channel_id: str = "UC_test",
) -> Video:
    return Video(
        video_id=video_id,
        platform_id=platform_id,
        channel_id=channel_id,
        title=f"Video {video_id}",
        time=VideoTime(published=NOW - timedelta(days=1), scheduled=scheduled),
        status=status,
        updated_at=updated_at,
    )


def _make_channel(channel_id: str, platform_id: str = "yt", organization: str = "Hololive") -> Channel:
    return Channel(
        channel_id=channel_id,
        platform_id=platform_id,
        name=f"Channel {channel_id}",
        organization=organization,
    )


def _make_item(
    video_id: str,
    start: str | None = None,
    end: str | None = None,
    live: bool = True,
    viewers: str | None = None,
) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": video_id,
        "snippet": {
            "channelId": "UC_test",
            "title": f"Stream {video_id}",
            "publishedAt": "2024-01-01T10:00:00Z",
        },
    }
    if live:
        details: dict[str, Any] = {"scheduledStartTime": "2024-01-01T12:00:00Z"}
        if start:
            details["actualStartTime"] = start
        if end:
            details["actualEndTime"] = end
        if viewers is not None:
            details["concurrentViewers"] = viewers
        item["liveStreamingDetails"] = details
    return item


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def make_video():
    """Factory for Video documents."""
    return _make_video


@pytest.fixture
def make_channel():
    """Factory for Channel documents."""
    return _make_channel


@pytest.fixture
def make_item():
    """Factory for raw ``videos.list`` items."""
    return _make_item


@pytest.fixture
def fetcher_factory():
    """Factory for scripted fetchers."""

    def _factory(items: Iterable[dict[str, Any]] = (), error: Exception | None = None) -> FakeFetcher:
        return FakeFetcher(items, error)

    return _factory


@pytest.fixture
def transport_error() -> FetchError:
    return FetchError("YouTube videos request failed: 503 Service Unavailable")

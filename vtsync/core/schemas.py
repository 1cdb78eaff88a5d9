"""Pydantic schemas for the sync engine."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class Platform(str, Enum):
    """Supported video-hosting platforms."""

    YOUTUBE = "yt"
    BILIBILI = "bb"
    TWITCH = "tt"


class VideoStatus(str, Enum):
    """Lifecycle status of a tracked video."""

    NEW = "new"
    UPCOMING = "upcoming"
    LIVE = "live"
    ENDED = "ended"
    UPLOADED = "uploaded"
    MISSING = "missing"


TERMINAL_STATUSES = frozenset({VideoStatus.ENDED, VideoStatus.UPLOADED, VideoStatus.MISSING})


class Channel(BaseModel):
    """Channel document as stored in MongoDB.

    ``platform_id`` is kept as the raw stored string; the router is the
    single place that checks it against :class:`Platform`.
    """

    channel_id: str
    platform_id: str
    name: str
    organization: str
    member_id: int | None = None
    twitter: str | None = None
    crawled_at: datetime | None = None
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def crawled(self) -> bool:
        return self.crawled_at is not None

    def model_dump_for_mongo(self) -> dict[str, Any]:
        """Convert to dict suitable for MongoDB storage."""
        return self.model_dump(exclude_none=True)


class VideoTime(BaseModel):
    """Time facts of a video."""

    published: datetime | None = None
    scheduled: datetime | None = None
    start: datetime | None = None
    end: datetime | None = None


class Video(BaseModel):
    """Video document as stored in MongoDB."""

    video_id: str
    platform_id: str
    channel_id: str | None = None
    title: str | None = None
    time: VideoTime = Field(default_factory=VideoTime)
    status: VideoStatus = VideoStatus.NEW
    viewers: int | None = Field(default=None, ge=0)
    updated_at: datetime = Field(default_factory=utcnow)

    def model_dump_for_mongo(self) -> dict[str, Any]:
        """Convert to dict suitable for MongoDB storage.

        Datetimes stay native so that range queries and sorting work.
        """
        data = self.model_dump(mode="python")
        data["_id"] = data.pop("video_id")
        data["status"] = self.status.value
        return data

    @classmethod
    def from_mongo(cls, doc: dict[str, Any]) -> "Video":
        data = dict(doc)
        if "_id" in data:
            data["video_id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class VideoUpdate(BaseModel):
    """Refresh result for a single video.

    Only explicitly set fields are written back, so a synthesized ``missing``
    record touches nothing but the status.
    """

    video_id: str
    platform_id: str = Platform.YOUTUBE.value
    status: VideoStatus
    channel_id: str | None = None
    title: str | None = None
    time: VideoTime | None = None
    viewers: int | None = Field(default=None, ge=0)

    @classmethod
    def missing(cls, video_id: str, platform_id: str = Platform.YOUTUBE.value) -> "VideoUpdate":
        return cls(video_id=video_id, platform_id=platform_id, status=VideoStatus.MISSING)

    def changes(self) -> dict[str, Any]:
        """Fields to ``$set`` on the stored video."""
        data = self.model_dump(exclude_unset=True, exclude={"video_id", "platform_id"})
        data["status"] = self.status.value
        return data

    def to_video(self) -> Video:
        """Build a full video document from a fetched record."""
        return Video(
            video_id=self.video_id,
            platform_id=self.platform_id,
            channel_id=self.channel_id,
            title=self.title,
            time=self.time or VideoTime(),
            status=self.status,
            viewers=self.viewers,
        )


class ScrapeOutcome(BaseModel):
    """Outcome of scraping one channel's history."""

    status: Literal["OK", "FAIL"]
    video_count: int = 0


class UpdateResult(BaseModel):
    """Result of one platform's update task."""

    platform_id: str
    tracked: int = 0
    selected: int = 0
    updated: int = 0
    missing: int = 0


class ScrapeResult(BaseModel):
    """Result of one platform's scrape task."""

    platform_id: str
    ok: list[str] = Field(default_factory=list)
    fail: list[str] = Field(default_factory=list)
    video_count: int = 0


class UpdateSummary(BaseModel):
    """Aggregate of all platform update tasks."""

    results: list[UpdateResult] = Field(default_factory=list)
    failed_platforms: list[str] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=utcnow)

    @property
    def updated(self) -> int:
        return sum(r.updated for r in self.results)

    @property
    def missing(self) -> int:
        return sum(r.missing for r in self.results)


class ScrapeSummary(BaseModel):
    """Aggregate of all platform scrape tasks, merged after join."""

    ok: list[str] = Field(default_factory=list)
    fail: list[str] = Field(default_factory=list)
    video_count: int = 0
    failed_platforms: list[str] = Field(default_factory=list)
    completed_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def merge(
        cls, results: list[ScrapeResult], failed_platforms: list[str] | None = None
    ) -> "ScrapeSummary":
        summary = cls(failed_platforms=list(failed_platforms or []))
        for result in results:
            summary.ok.extend(result.ok)
            summary.fail.extend(result.fail)
            summary.video_count += result.video_count
        return summary


class FieldError(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str


class ChannelValidationFailure(BaseModel):
    """A channel definition that failed validation."""

    filename: str
    entry: dict[str, Any]
    errors: list[FieldError]


class ValidationReport(BaseModel):
    """Result of validating all channel definitions."""

    total: int = 0
    failures: list[ChannelValidationFailure] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.total > 0 and not self.failures


class PersistReport(BaseModel):
    """Result of saving channel definition files."""

    saved_files: list[str] = Field(default_factory=list)
    failed_files: list[str] = Field(default_factory=list)
    channels_saved: int = 0


class InitReport(BaseModel):
    """Result of the full initialization sequence."""

    validation: ValidationReport
    persist: PersistReport | None = None
    update: UpdateSummary | None = None
    scrape: ScrapeSummary | None = None

    @property
    def aborted(self) -> bool:
        return not self.validation.ok

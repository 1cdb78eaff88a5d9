"""Stale video selection and batched status refresh."""

from collections.abc import Callable, Sequence
from datetime import datetime, timedelta
from typing import Any

from vtsync.core.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_LOOKAHEAD_MINUTES,
    VIDEO_FIELDS,
    VIDEO_PARTS,
    YOUTUBE_MAX_BATCH,
)
from vtsync.core.logging_config import get_logger, log_update_event
from vtsync.core.schemas import Platform, UpdateResult, VideoStatus, VideoTime, VideoUpdate, utcnow
from vtsync.sync.ports import StaleVideoQuery, SyncStore, VideoFetcher
from vtsync.sync.reconciler import reconcile
from vtsync.sync.status import derive_status, parse_timestamp, parse_viewers

logger = get_logger("sync.scheduler")


def parse_video_item(item: dict[str, Any], platform_id: str = Platform.YOUTUBE.value) -> VideoUpdate:
    """
    Map a raw ``videos.list`` item to a refresh record.

    Args:
        item: API item with ``id``, ``snippet`` and optional ``liveStreamingDetails``
        platform_id: Platform the item belongs to

    Returns:
        VideoUpdate with every field set and status derived from the details
    """
    snippet = item.get("snippet") or {}
    details = item.get("liveStreamingDetails")
    live = details or {}

    return VideoUpdate(
        video_id=item["id"],
        platform_id=platform_id,
        channel_id=snippet.get("channelId"),
        title=snippet.get("title"),
        time=VideoTime(
            published=parse_timestamp(snippet.get("publishedAt")),
            scheduled=parse_timestamp(live.get("scheduledStartTime")),
            start=parse_timestamp(live.get("actualStartTime")),
            end=parse_timestamp(live.get("actualEndTime")),
        ),
        status=derive_status(details),
        viewers=parse_viewers(live.get("concurrentViewers")),
    )


class FetchScheduler:
    """Select stale videos of one platform and refresh them in one batch.

    Usage:
        scheduler = FetchScheduler(store, client.videos)
        result = await scheduler.run()
    """

    def __init__(
        self,
        store: SyncStore,
        fetch: VideoFetcher,
        platform_id: str = Platform.YOUTUBE.value,
        batch_size: int = DEFAULT_BATCH_SIZE,
        lookahead: timedelta = timedelta(minutes=DEFAULT_LOOKAHEAD_MINUTES),
        parse: Callable[[dict[str, Any], str], VideoUpdate] = parse_video_item,
    ) -> None:
        if not 1 <= batch_size <= YOUTUBE_MAX_BATCH:
            raise ValueError(f"batch_size must be between 1 and {YOUTUBE_MAX_BATCH}, got {batch_size}")
        self.store = store
        self.fetch = fetch
        self.platform_id = platform_id
        self.batch_size = batch_size
        self.lookahead = lookahead
        self.parse = parse

    def stale_query(self, now: datetime) -> StaleVideoQuery:
        """Build the selection predicate evaluated at ``now``."""
        return StaleVideoQuery(
            platform_id=self.platform_id,
            upcoming_before=now + self.lookahead,
            limit=self.batch_size,
        )

    async def select_stale(self, now: datetime | None = None) -> list[str]:
        """
        Select ids of videos due for a refresh, oldest-refreshed first.

        Args:
            now: Evaluation instant (defaults to the current time)

        Returns:
            At most ``batch_size`` video ids
        """
        query = self.stale_query(now or utcnow())
        logger.debug(f"Looking for videos to update [{self.platform_id}]...")
        videos = [video for video in await self.store.find_videos(query) if query.matches(video)]
        return [video.video_id for video in videos[: self.batch_size]]

    async def refresh(self, video_ids: Sequence[str]) -> list[VideoUpdate]:
        """
        Fetch fresh metadata for ``video_ids`` and derive their status.

        Transport errors from the fetch propagate to the caller. Ids the
        response omits come back as ``missing`` records.
        """
        logger.debug(f"Fetching {len(video_ids)} videos [{self.platform_id}]...")
        items = await self.fetch(list(video_ids), part=VIDEO_PARTS, fields=VIDEO_FIELDS)
        fetched: list[VideoUpdate] = []
        for item in items:
            if not item.get("id"):
                logger.warning(f"Skipping item without id [{self.platform_id}]: {item!r}")
                continue
            fetched.append(self.parse(item, self.platform_id))
        logger.debug(f"Fetched {len(fetched)} of {len(video_ids)} videos [{self.platform_id}]")
        return reconcile(video_ids, fetched, self.platform_id)

    async def run(self, now: datetime | None = None) -> UpdateResult:
        """Select, refresh and write back one batch of stale videos."""
        result = UpdateResult(platform_id=self.platform_id)

        video_ids = await self.select_stale(now)
        result.selected = len(video_ids)
        if not video_ids:
            log_update_event(logger, self.platform_id, "skipped", selected=0)
            return result

        log_update_event(logger, self.platform_id, "started", selected=result.selected)
        records = await self.refresh(video_ids)
        result.updated = await self.store.update_videos(records)
        result.missing = sum(1 for r in records if r.status == VideoStatus.MISSING)
        log_update_event(
            logger,
            self.platform_id,
            "completed",
            selected=result.selected,
            updated=result.updated,
            missing=result.missing,
        )
        return result

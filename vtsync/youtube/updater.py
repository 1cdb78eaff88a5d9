"""YouTube video updater - refreshes stale YouTube videos."""

from collections.abc import Sequence

from vtsync.core.config import Settings, get_settings
from vtsync.core.schemas import Platform, UpdateResult, Video
from vtsync.sync.ports import SyncStore
from vtsync.sync.scheduler import FetchScheduler
from vtsync.youtube.client import YouTubeClient


class YouTubeUpdater:
    """Platform updater backed by :class:`FetchScheduler`.

    The scheduler selects its own candidates from the store; the bucket of
    known videos only tells the orchestrator there is something to do.
    """

    def __init__(
        self,
        client: YouTubeClient,
        store: SyncStore,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.scheduler = FetchScheduler(
            store,
            client.videos,
            platform_id=Platform.YOUTUBE.value,
            batch_size=settings.sync_batch_size,
            lookahead=settings.lookahead,
        )

    async def __call__(self, videos: Sequence[Video]) -> UpdateResult:
        return await self.scheduler.run()

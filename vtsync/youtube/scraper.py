"""YouTube channel scraper - discovers a channel's historical videos."""

from vtsync.core.constants import YOUTUBE_MAX_BATCH
from vtsync.core.exceptions import ScrapeError
from vtsync.core.logging_config import get_logger
from vtsync.core.schemas import Channel, Platform, ScrapeOutcome
from vtsync.sync.ports import SyncStore
from vtsync.sync.scheduler import parse_video_item
from vtsync.youtube.client import YouTubeClient

logger = get_logger("youtube.scraper")


class YouTubeChannelScraper:
    """Scrape a channel's uploads playlist and store videos not yet tracked.

    Strategy:
    1. Resolve the channel's uploads playlist
    2. List every video id in it
    3. Fetch metadata only for ids not already stored, 50 at a time
    """

    def __init__(self, client: YouTubeClient, store: SyncStore) -> None:
        self.client = client
        self.store = store

    async def __call__(self, channel: Channel) -> ScrapeOutcome:
        playlist_id = await self.client.uploads_playlist(channel.channel_id)
        if playlist_id is None:
            raise ScrapeError(f"Channel not found on YouTube: {channel.channel_id}")

        video_ids = await self.client.playlist_video_ids(playlist_id)
        existing = await self.store.existing_video_ids(video_ids)
        new_ids = [video_id for video_id in video_ids if video_id not in existing]
        logger.debug(
            f"{channel.channel_id}: {len(video_ids)} uploads, {len(new_ids)} not yet tracked"
        )

        inserted = 0
        for start in range(0, len(new_ids), YOUTUBE_MAX_BATCH):
            batch = new_ids[start : start + YOUTUBE_MAX_BATCH]
            items = await self.client.videos(batch)
            videos = [parse_video_item(item, Platform.YOUTUBE.value).to_video() for item in items]
            inserted += await self.store.insert_videos(videos)

        return ScrapeOutcome(status="OK", video_count=inserted)

"""YouTube platform adapter: API client, updater and channel scraper."""

from vtsync.core.config import Settings
from vtsync.core.schemas import Platform
from vtsync.sync.ports import SyncStore
from vtsync.sync.registry import PlatformRegistry

from .client import YouTubeClient
from .scraper import YouTubeChannelScraper
from .updater import YouTubeUpdater


def register_youtube(
    registry: PlatformRegistry,
    store: SyncStore,
    client: YouTubeClient,
    settings: Settings | None = None,
) -> PlatformRegistry:
    """Register the YouTube updater and scraper on ``registry``."""
    registry.register_updater(Platform.YOUTUBE, YouTubeUpdater(client, store, settings))
    registry.register_scraper(Platform.YOUTUBE, YouTubeChannelScraper(client, store))
    return registry


__all__ = [
    "YouTubeClient",
    "YouTubeChannelScraper",
    "YouTubeUpdater",
    "register_youtube",
]

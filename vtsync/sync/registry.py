"""Registry of per-platform update and scrape capabilities."""

from vtsync.core.schemas import Platform
from vtsync.sync.ports import ChannelScraper, PlatformUpdater


class PlatformRegistry:
    """Maps platforms to their updater and scraper.

    A platform without a registered capability is skipped by the
    orchestrator, so new platforms can be added before their pipelines.
    """

    def __init__(self) -> None:
        self._updaters: dict[Platform, PlatformUpdater] = {}
        self._scrapers: dict[Platform, ChannelScraper] = {}

    def register_updater(self, platform: Platform | str, updater: PlatformUpdater) -> None:
        self._updaters[Platform(platform)] = updater

    def register_scraper(self, platform: Platform | str, scraper: ChannelScraper) -> None:
        self._scrapers[Platform(platform)] = scraper

    def updater(self, platform: Platform) -> PlatformUpdater | None:
        return self._updaters.get(platform)

    def scraper(self, platform: Platform) -> ChannelScraper | None:
        return self._scrapers.get(platform)

    @property
    def platforms(self) -> set[Platform]:
        """Platforms with at least one registered capability."""
        return set(self._updaters) | set(self._scrapers)

"""Tests for per-platform partitioning and the platform registry."""

import pytest

from vtsync.core.exceptions import UnknownPlatformError
from vtsync.core.schemas import Platform
from vtsync.sync.registry import PlatformRegistry
from vtsync.sync.router import partition


def test_every_platform_has_a_bucket():
    assert partition([]) == {Platform.YOUTUBE: [], Platform.BILIBILI: [], Platform.TWITCH: []}


def test_stable_partition(make_video):
    platforms = ["yt", "tt", "yt", "bb", "tt", "yt", "bb"]
    videos = [make_video(f"v{i}", platform_id=p) for i, p in enumerate(platforms)]

    buckets = partition(videos)

    assert sum(len(bucket) for bucket in buckets.values()) == len(videos)
    assert [v.video_id for v in buckets[Platform.YOUTUBE]] == ["v0", "v2", "v5"]
    assert [v.video_id for v in buckets[Platform.TWITCH]] == ["v1", "v4"]
    assert [v.video_id for v in buckets[Platform.BILIBILI]] == ["v3", "v6"]


def test_channels_are_partitioned(make_channel):
    channels = [make_channel("UC1"), make_channel("tt1", "tt")]
    buckets = partition(channels)
    assert buckets[Platform.TWITCH][0].channel_id == "tt1"


def test_unknown_platform_is_rejected(make_video):
    videos = [make_video("ok"), make_video("bad", platform_id="nn")]

    with pytest.raises(UnknownPlatformError) as exc_info:
        partition(videos)

    assert exc_info.value.platform_id == "nn"
    assert exc_info.value.entity_id == "bad"


def test_registry_lookups():
    async def scraper(channel):
        return None

    registry = PlatformRegistry()
    registry.register_scraper("tt", scraper)

    assert registry.scraper(Platform.TWITCH) is scraper
    assert registry.updater(Platform.TWITCH) is None
    assert registry.scraper(Platform.YOUTUBE) is None
    assert registry.platforms == {Platform.TWITCH}


def test_registry_rejects_unknown_platform():
    with pytest.raises(ValueError):
        PlatformRegistry().register_updater("nn", lambda videos: None)

"""Synchronization engine: status derivation, refresh scheduling, orchestration."""

from vtsync.core.schemas import (
    Channel,
    Platform,
    ScrapeOutcome,
    ScrapeResult,
    ScrapeSummary,
    UpdateResult,
    UpdateSummary,
    Video,
    VideoStatus,
    VideoTime,
    VideoUpdate,
)

from .orchestrator import ACTION_STAGES, Action, Orchestrator, Stage
from .ports import ChannelScraper, PlatformUpdater, StaleVideoQuery, SyncStore, VideoFetcher
from .reconciler import reconcile
from .registry import PlatformRegistry
from .router import partition
from .scheduler import FetchScheduler, parse_video_item
from .status import derive_status, parse_timestamp, parse_viewers

__all__ = [
    # Status
    "derive_status",
    "parse_viewers",
    "parse_timestamp",
    # Reconciler
    "reconcile",
    # Scheduler
    "FetchScheduler",
    "parse_video_item",
    # Router
    "partition",
    # Registry
    "PlatformRegistry",
    # Orchestrator
    "Orchestrator",
    "Action",
    "Stage",
    "ACTION_STAGES",
    # Ports
    "StaleVideoQuery",
    "SyncStore",
    "VideoFetcher",
    "PlatformUpdater",
    "ChannelScraper",
    # Schemas
    "Platform",
    "VideoStatus",
    "Channel",
    "Video",
    "VideoTime",
    "VideoUpdate",
    "ScrapeOutcome",
    "UpdateResult",
    "ScrapeResult",
    "UpdateSummary",
    "ScrapeSummary",
]

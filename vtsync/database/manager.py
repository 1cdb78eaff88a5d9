"""MongoDB database manager.

This module handles MongoDB connection management and implements the
persistence operations the sync engine consumes.
"""

from collections.abc import AsyncGenerator, Iterable, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument, UpdateOne
from pymongo.errors import BulkWriteError, PyMongoError

from vtsync.core.config import Settings, get_settings
from vtsync.core.constants import MEMBER_COUNTER
from vtsync.core.exceptions import DatabaseError
from vtsync.core.logging_config import get_logger
from vtsync.core.schemas import Channel, Video, VideoStatus, VideoUpdate, utcnow
from vtsync.sync.ports import StaleVideoQuery

logger = get_logger("database")

DUPLICATE_KEY = 11000


def build_stale_filter(query: StaleVideoQuery) -> dict[str, Any]:
    """Translate a stale-video query into a MongoDB filter."""
    return {
        "platform_id": query.platform_id,
        "$or": [
            {"status": {"$in": sorted(status.value for status in query.statuses)}},
            {
                "status": VideoStatus.UPCOMING.value,
                "time.scheduled": {"$lte": query.upcoming_before},
            },
        ],
    }


class MongoDBManager:
    """Manage MongoDB operations for the sync engine.

    This class provides:
    - Connection lifecycle management
    - Stale video selection and per-id write-back
    - Channel storage with member numbering from the ``counters`` collection
    - Index management

    Usage:
        async with MongoDBManager() as db:
            videos = await db.list_videos()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize MongoDB manager."""
        self.settings = settings or get_settings()
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None
        self.videos: Any | None = None
        self.channels: Any | None = None
        self.counters: Any | None = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize MongoDB connection."""
        if self._initialized:
            return

        self.client = AsyncIOMotorClient(self.settings.mongodb_url, tz_aware=True)
        self.db = self.client[self.settings.mongodb_database]
        self.videos = self.db.videos
        self.channels = self.db.channels
        self.counters = self.db.counters
        self._initialized = True
        logger.debug("Established connection to MongoDB.")

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self.client and self._initialized:
            self.client.close()
            self._initialized = False

    async def __aenter__(self) -> "MongoDBManager":
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def init_indexes(self) -> None:
        """Initialize database indexes."""
        await self.initialize()

        await self.videos.create_index("status")
        await self.videos.create_index("channel_id")
        await self.videos.create_index("time.scheduled")
        await self.videos.create_index("updated_at")

        await self.channels.create_index(
            [("channel_id", ASCENDING), ("platform_id", ASCENDING)], unique=True
        )
        await self.channels.create_index("crawled_at")

    # Counters

    async def next_sequence(self, name: str) -> int:
        """Atomically increment and return the counter ``name``."""
        await self.initialize()
        doc = await self.counters.find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["seq"])

    # Video operations

    async def find_videos(self, query: StaleVideoQuery) -> list[Video]:
        """Select videos matching a stale query, oldest-updated first.

        Args:
            query: Stale video selection

        Returns:
            At most ``query.limit`` videos
        """
        await self.initialize()
        cursor = (
            self.videos.find(build_stale_filter(query))
            .sort("updated_at", ASCENDING)
            .limit(query.limit)
        )
        return [Video.from_mongo(doc) async for doc in cursor]

    async def list_videos(self) -> list[Video]:
        """List every tracked video."""
        await self.initialize()
        return [Video.from_mongo(doc) async for doc in self.videos.find({})]

    async def existing_video_ids(self, video_ids: Iterable[str]) -> set[str]:
        """Return which of ``video_ids`` are already stored."""
        await self.initialize()
        cursor = self.videos.find({"_id": {"$in": list(video_ids)}}, {"_id": 1})
        return {str(doc["_id"]) async for doc in cursor}

    async def insert_videos(self, videos: Sequence[Video]) -> int:
        """Insert new videos, skipping ids that already exist.

        Returns:
            Number of videos inserted
        """
        if not videos:
            return 0
        await self.initialize()
        docs = [video.model_dump_for_mongo() for video in videos]
        try:
            result = await self.videos.insert_many(docs, ordered=False)
        except BulkWriteError as e:
            errors = e.details.get("writeErrors", [])
            if any(err.get("code") != DUPLICATE_KEY for err in errors):
                raise DatabaseError(f"Failed to insert videos: {errors}") from e
            return int(e.details.get("nInserted", 0))
        return len(result.inserted_ids)

    async def update_videos(self, updates: Sequence[VideoUpdate]) -> int:
        """Write refresh results back, one atomic update per video.

        Returns:
            Number of videos matched
        """
        if not updates:
            return 0
        await self.initialize()
        now = utcnow()
        operations = [
            UpdateOne({"_id": update.video_id}, {"$set": {**update.changes(), "updated_at": now}})
            for update in updates
        ]
        try:
            result = await self.videos.bulk_write(operations, ordered=False)
        except PyMongoError as e:
            raise DatabaseError(f"Failed to update videos: {e}") from e
        return result.matched_count

    # Channel operations

    async def list_channels(self, uncrawled_only: bool = False) -> list[Channel]:
        """List channels, optionally only those never crawled."""
        await self.initialize()
        query: dict[str, Any] = {"crawled_at": None} if uncrawled_only else {}
        cursor = self.channels.find(query, {"_id": 0})
        return [Channel.model_validate(doc) async for doc in cursor]

    async def insert_channels(self, channels: Sequence[Channel]) -> int:
        """Insert channels, numbering members from the ``member_id`` counter.

        Raises:
            DatabaseError: Insert failed (e.g. duplicate channel)
        """
        if not channels:
            return 0
        await self.initialize()
        docs = []
        for channel in channels:
            if channel.member_id is None:
                channel = channel.model_copy(
                    update={"member_id": await self.next_sequence(MEMBER_COUNTER)}
                )
            docs.append(channel.model_dump_for_mongo())
        try:
            result = await self.channels.insert_many(docs)
        except PyMongoError as e:
            raise DatabaseError(f"Failed to insert channels: {e}") from e
        return len(result.inserted_ids)

    async def mark_crawled(self, channel: Channel, when: datetime) -> None:
        """Set the crawl marker on a channel."""
        await self.initialize()
        await self.channels.update_one(
            {"channel_id": channel.channel_id, "platform_id": channel.platform_id},
            {"$set": {"crawled_at": when, "updated_at": when}},
        )

    # Maintenance

    async def drop_collections(self) -> None:
        """Drop channel data and reset member numbering."""
        await self.initialize()
        await self.channels.drop()
        await self.counters.delete_one({"_id": MEMBER_COUNTER})
        logger.info("Dropped channels collection.")

    async def drop_database(self) -> None:
        """Drop the whole database."""
        await self.initialize()
        await self.client.drop_database(self.settings.mongodb_database)
        logger.info(f"Dropped {self.settings.mongodb_database} database.")


# Singleton instance for application-wide use
_db_manager: MongoDBManager | None = None


def get_db_manager() -> MongoDBManager:
    """Get or create the global database manager instance.

    Returns:
        MongoDBManager instance
    """
    global _db_manager
    if _db_manager is None:
        _db_manager = MongoDBManager()
    return _db_manager


@asynccontextmanager
async def get_db_manager_context() -> AsyncGenerator[MongoDBManager, None]:
    """Get database manager with proper lifecycle management.

    Usage:
        async with get_db_manager_context() as db:
            await db.list_videos()

    Yields:
        MongoDBManager instance with initialized connection
    """
    db = MongoDBManager()
    try:
        await db.initialize()
        yield db
    finally:
        await db.close()

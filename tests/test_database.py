"""Tests for the MongoDB persistence adapter (no server required)."""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import UpdateOne
from pymongo.errors import BulkWriteError

from vtsync.core.config import Settings
from vtsync.core.exceptions import DatabaseError
from vtsync.core.schemas import Video, VideoStatus, VideoUpdate
from vtsync.database import MongoDBManager, build_stale_filter
from vtsync.sync.ports import StaleVideoQuery

from conftest import NOW


def _manager() -> MongoDBManager:
    manager = MongoDBManager(Settings(mongodb_database="test_vtsync"))
    manager._initialized = True
    manager.videos = MagicMock()
    manager.channels = MagicMock()
    manager.counters = MagicMock()
    return manager


def test_stale_filter():
    query = StaleVideoQuery(platform_id="yt", upcoming_before=NOW + timedelta(hours=1), limit=50)

    assert build_stale_filter(query) == {
        "platform_id": "yt",
        "$or": [
            {"status": {"$in": ["live", "new"]}},
            {"status": "upcoming", "time.scheduled": {"$lte": NOW + timedelta(hours=1)}},
        ],
    }


def test_video_round_trip_through_mongo_document(make_video):
    video = make_video("A", VideoStatus.LIVE, scheduled=NOW)
    doc = video.model_dump_for_mongo()

    assert doc["_id"] == "A"
    assert "video_id" not in doc
    assert doc["status"] == "live"
    assert doc["time"]["scheduled"] == NOW
    assert Video.from_mongo(doc) == video


@pytest.mark.asyncio
async def test_update_videos_sets_only_changed_fields():
    manager = _manager()
    manager.videos.bulk_write = AsyncMock(return_value=MagicMock(matched_count=1))

    matched = await manager.update_videos([VideoUpdate.missing("B")])

    assert matched == 1
    (operations,), kwargs = manager.videos.bulk_write.call_args
    assert kwargs == {"ordered": False}
    (operation,) = operations
    assert isinstance(operation, UpdateOne)
    assert operation._filter == {"_id": "B"}
    assert set(operation._doc["$set"]) == {"status", "updated_at"}
    assert operation._doc["$set"]["status"] == "missing"


@pytest.mark.asyncio
async def test_update_videos_empty_is_noop():
    manager = _manager()
    manager.videos.bulk_write = AsyncMock()
    assert await manager.update_videos([]) == 0
    manager.videos.bulk_write.assert_not_called()


@pytest.mark.asyncio
async def test_insert_videos_ignores_duplicates(make_video):
    manager = _manager()
    manager.videos.insert_many = AsyncMock(
        side_effect=BulkWriteError({"writeErrors": [{"code": 11000}], "nInserted": 1})
    )
    assert await manager.insert_videos([make_video("A"), make_video("B")]) == 1


@pytest.mark.asyncio
async def test_insert_videos_raises_on_other_errors(make_video):
    manager = _manager()
    manager.videos.insert_many = AsyncMock(
        side_effect=BulkWriteError({"writeErrors": [{"code": 121}], "nInserted": 0})
    )
    with pytest.raises(DatabaseError):
        await manager.insert_videos([make_video("A")])


@pytest.mark.asyncio
async def test_insert_channels_assigns_member_ids(make_channel):
    manager = _manager()
    manager.counters.find_one_and_update = AsyncMock(side_effect=[{"seq": 7}, {"seq": 8}])
    manager.channels.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=[1, 2]))

    saved = await manager.insert_channels([make_channel("UC1"), make_channel("UC2")])

    assert saved == 2
    (docs,), _ = manager.channels.insert_many.call_args
    assert [doc["member_id"] for doc in docs] == [7, 8]
    assert all("crawled_at" not in doc for doc in docs)

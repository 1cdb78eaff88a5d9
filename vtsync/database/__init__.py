"""Database module for MongoDB operations.

Usage:
    # Context manager (recommended)
    async with MongoDBManager() as db:
        await db.list_videos()

    # Manual lifecycle
    db = MongoDBManager()
    try:
        await db.initialize()
        await db.list_videos()
    finally:
        await db.close()
"""

from vtsync.database.manager import (
    MongoDBManager,
    build_stale_filter,
    get_db_manager,
    get_db_manager_context,
)

__all__ = [
    "MongoDBManager",
    "build_stale_filter",
    "get_db_manager",
    "get_db_manager_context",
]

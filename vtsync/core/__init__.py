"""Core package for the sync engine."""

from vtsync.core.config import Settings, get_settings, get_settings_with_yaml
from vtsync.core.exceptions import (
    ChannelDefinitionError,
    ConfigurationError,
    DatabaseError,
    FetchError,
    NoChannelsFoundError,
    ScrapeError,
    SyncError,
    UnknownPlatformError,
)
from vtsync.core.http_session import close_all_sessions, get_session
from vtsync.core.logging_config import (
    get_logger,
    log_scrape_event,
    log_update_event,
    setup_logging,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_settings_with_yaml",
    # Errors
    "SyncError",
    "ConfigurationError",
    "FetchError",
    "ScrapeError",
    "ChannelDefinitionError",
    "NoChannelsFoundError",
    "UnknownPlatformError",
    "DatabaseError",
    # Logging
    "setup_logging",
    "get_logger",
    "log_update_event",
    "log_scrape_event",
    # HTTP
    "get_session",
    "close_all_sessions",
]

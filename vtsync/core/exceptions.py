"""Custom exceptions for the sync engine."""


class SyncError(Exception):
    """Base exception for sync engine errors."""

    pass


class ConfigurationError(SyncError):
    """Required configuration is missing or invalid."""

    pass


class FetchError(SyncError):
    """External metadata fetch failed at the transport level."""

    pass


class ScrapeError(SyncError):
    """Historical scrape of a channel failed."""

    pass


class ChannelDefinitionError(SyncError):
    """A channel definition file could not be read."""

    pass


class NoChannelsFoundError(ChannelDefinitionError):
    """No channel definitions were found."""

    pass


class UnknownPlatformError(SyncError):
    """An entity carries a platform id outside the supported set."""

    def __init__(self, platform_id: object, entity_id: str | None = None):
        self.platform_id = platform_id
        self.entity_id = entity_id
        detail = f" (entity {entity_id})" if entity_id else ""
        super().__init__(f"Unknown platform id {platform_id!r}{detail}")


class DatabaseError(SyncError):
    """Database operation failed."""

    pass

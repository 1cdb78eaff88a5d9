"""Application constants.

This module centralizes engine-wide constants for:
- Application metadata
- External API limits
- Sync engine defaults
"""

# =============================================================================
# Application Metadata
# =============================================================================

APP_NAME = "vtsync"
APP_VERSION = "0.1.0"

# =============================================================================
# YouTube Data API
# =============================================================================

YOUTUBE_API_BASE_URL = "https://www.googleapis.com/youtube/v3"

# videos.list and playlistItems.list accept at most 50 ids/results per call
YOUTUBE_MAX_BATCH = 50

VIDEO_PARTS = "snippet,liveStreamingDetails"
VIDEO_FIELDS = "items(id,snippet,liveStreamingDetails)"

# =============================================================================
# Sync Engine Defaults
# =============================================================================

DEFAULT_LOOKAHEAD_MINUTES = 60
DEFAULT_BATCH_SIZE = YOUTUBE_MAX_BATCH

# =============================================================================
# Persistence
# =============================================================================

MEMBER_COUNTER = "member_id"

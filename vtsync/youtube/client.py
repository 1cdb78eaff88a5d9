"""YouTube Data API v3 client."""

import asyncio
from collections.abc import Sequence
from typing import Any

import requests

from vtsync.core.config import Settings, get_settings
from vtsync.core.constants import (
    VIDEO_FIELDS,
    VIDEO_PARTS,
    YOUTUBE_API_BASE_URL,
    YOUTUBE_MAX_BATCH,
)
from vtsync.core.exceptions import ConfigurationError, FetchError
from vtsync.core.http_session import get_session
from vtsync.core.logging_config import get_logger

logger = get_logger("youtube.client")


class YouTubeClient:
    """Minimal YouTube Data API client.

    Requests are blocking and run in a worker thread, so callers await
    them like any other suspension point. No retrying is done here.

    Usage:
        client = YouTubeClient.from_settings()
        items = await client.videos(["dQw4w9WgXcQ"])
    """

    def __init__(
        self,
        api_key: str,
        session: requests.Session | None = None,
        timeout: int = 30,
        language: str | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("GOOGLE_API_KEY is undefined!")
        self.api_key = api_key
        self.session = session or get_session("youtube")
        self.timeout = timeout
        self.language = language

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "YouTubeClient":
        """Build a client from application settings."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.google_api_key or "",
            timeout=settings.youtube_api_timeout,
            language=settings.youtube_api_language,
        )

    def _get(self, resource: str, params: dict[str, Any]) -> dict[str, Any]:
        """Issue a GET against ``resource``; raise FetchError on any failure."""
        url = f"{YOUTUBE_API_BASE_URL}/{resource}"
        try:
            response = self.session.get(
                url, params={**params, "key": self.api_key}, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise FetchError(f"YouTube {resource} request failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"YouTube {resource} returned invalid JSON: {e}") from e

    async def request(self, resource: str, **params: Any) -> dict[str, Any]:
        """Call an API resource without blocking the event loop."""
        return await asyncio.to_thread(self._get, resource, params)

    async def videos(
        self,
        video_ids: Sequence[str],
        *,
        part: str = VIDEO_PARTS,
        fields: str = VIDEO_FIELDS,
    ) -> list[dict[str, Any]]:
        """
        Fetch metadata for up to 50 videos in one call.

        Args:
            video_ids: Video ids to look up
            part: Resource parts to request
            fields: Field selection

        Returns:
            Raw API items; unknown or private ids are simply absent
        """
        if not video_ids:
            return []
        if len(video_ids) > YOUTUBE_MAX_BATCH:
            raise ValueError(f"At most {YOUTUBE_MAX_BATCH} ids per call, got {len(video_ids)}")

        params: dict[str, Any] = {"part": part, "fields": fields, "id": ",".join(video_ids)}
        if self.language:
            params["hl"] = self.language
        data = await self.request("videos", **params)
        items = data.get("items", [])
        logger.debug(f"Fetched {len(items)} of {len(video_ids)} videos from YouTube")
        return items

    async def uploads_playlist(self, channel_id: str) -> str | None:
        """Return the uploads playlist id of a channel, or None if unknown."""
        data = await self.request(
            "channels",
            part="contentDetails",
            fields="items(contentDetails/relatedPlaylists/uploads)",
            id=channel_id,
        )
        items = data.get("items") or []
        if not items:
            return None
        return items[0].get("contentDetails", {}).get("relatedPlaylists", {}).get("uploads")

    async def playlist_video_ids(self, playlist_id: str) -> list[str]:
        """List every video id in a playlist, following pagination."""
        video_ids: list[str] = []
        page_token: str | None = None
        while True:
            params: dict[str, Any] = {
                "part": "contentDetails",
                "fields": "nextPageToken,items(contentDetails/videoId)",
                "playlistId": playlist_id,
                "maxResults": YOUTUBE_MAX_BATCH,
            }
            if page_token:
                params["pageToken"] = page_token
            data = await self.request("playlistItems", **params)
            for item in data.get("items", []):
                video_id = item.get("contentDetails", {}).get("videoId")
                if video_id:
                    video_ids.append(video_id)
            page_token = data.get("nextPageToken")
            if not page_token:
                return video_ids

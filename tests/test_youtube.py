"""Tests for the YouTube Data API adapter."""

from unittest.mock import MagicMock

import pytest
import requests

from vtsync.core.config import Settings
from vtsync.core.exceptions import ConfigurationError, FetchError, ScrapeError
from vtsync.core.schemas import VideoStatus
from vtsync.youtube import YouTubeChannelScraper, YouTubeClient

from conftest import InMemoryStore


def _response(payload=None, status_code=200):
    response = MagicMock()
    response.json.return_value = payload or {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Error")
    return response


def _client(*responses):
    session = MagicMock()
    session.get.side_effect = list(responses)
    return YouTubeClient("test-key", session=session, language="ja"), session


class TestClient:
    """Test YouTubeClient requests."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError, match="GOOGLE_API_KEY"):
            YouTubeClient.from_settings(Settings(google_api_key=None))

    @pytest.mark.asyncio
    async def test_videos_batches_ids(self, make_item):
        client, session = _client(_response({"items": [make_item("A")]}))

        items = await client.videos(["A", "B"])

        assert [item["id"] for item in items] == ["A"]
        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url.endswith("/videos")
        assert params["id"] == "A,B"
        assert params["part"] == "snippet,liveStreamingDetails"
        assert params["fields"] == "items(id,snippet,liveStreamingDetails)"
        assert params["hl"] == "ja"
        assert params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_videos_rejects_oversized_batch(self):
        client, _ = _client()
        with pytest.raises(ValueError):
            await client.videos([f"v{i}" for i in range(51)])

    @pytest.mark.asyncio
    async def test_http_error_becomes_fetch_error(self):
        client, _ = _client(_response(status_code=403))
        with pytest.raises(FetchError, match="videos"):
            await client.videos(["A"])

    @pytest.mark.asyncio
    async def test_connection_error_becomes_fetch_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("refused")
        client = YouTubeClient("test-key", session=session)
        with pytest.raises(FetchError):
            await client.videos(["A"])

    @pytest.mark.asyncio
    async def test_playlist_pagination(self):
        client, session = _client(
            _response({"items": [{"contentDetails": {"videoId": "A"}}], "nextPageToken": "p2"}),
            _response({"items": [{"contentDetails": {"videoId": "B"}}, {"contentDetails": {}}]}),
        )

        video_ids = await client.playlist_video_ids("UU1")

        assert video_ids == ["A", "B"]
        assert session.get.call_args_list[1].kwargs["params"]["pageToken"] == "p2"


class TestChannelScraper:
    """Test YouTubeChannelScraper."""

    @pytest.mark.asyncio
    async def test_stores_only_new_videos(self, make_channel, make_video, make_item):
        store = InMemoryStore([make_video("A", VideoStatus.ENDED)])
        client, session = _client(
            _response({"items": [{"contentDetails": {"relatedPlaylists": {"uploads": "UU1"}}}]}),
            _response({"items": [{"contentDetails": {"videoId": v}} for v in ("A", "B", "C")]}),
            _response({"items": [make_item("B", live=False), make_item("C")]}),
        )

        outcome = await YouTubeChannelScraper(client, store)(make_channel("UC1"))

        assert outcome.status == "OK"
        assert outcome.video_count == 2
        assert store.videos["B"].status == VideoStatus.UPLOADED
        assert store.videos["C"].status == VideoStatus.UPCOMING
        assert session.get.call_args_list[2].kwargs["params"]["id"] == "B,C"

    @pytest.mark.asyncio
    async def test_unknown_channel_raises(self, make_channel):
        client, _ = _client(_response({"items": []}))
        with pytest.raises(ScrapeError):
            await YouTubeChannelScraper(client, InMemoryStore())(make_channel("UC404"))

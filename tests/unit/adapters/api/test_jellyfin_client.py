"""
Tests for the Jellyfin media-server client.

Uses respx to mock HTTP requests and test the full client behavior
including URL building, playback reports, reads with retry and login.
"""

import json
from urllib.parse import parse_qsl, urlsplit

import httpx
import pytest
import respx

from stingray.adapters.api.jellyfin_client import JellyfinClient
from stingray.core.ports import (
    AuthenticationError,
    DecodeError,
    IMediaServerClient,
    MediaServerError,
)
from stingray.core.value_objects import ImageKind, PlaybackEvent, PlaybackReport
from tests.fixtures.jellyfin_responses import (
    JELLYFIN_EPISODES_RESPONSE,
    JELLYFIN_LOGIN_RESPONSE,
    JELLYFIN_MOVIE_RESPONSE,
)

BASE_URL = "http://jellyfin.test"


@pytest.fixture
def client() -> JellyfinClient:
    return JellyfinClient(server_url=BASE_URL + "/", device_id="device-1")


@pytest.fixture
def report() -> PlaybackReport:
    return PlaybackReport(
        item_id="ep-1",
        media_source_id="src-ep-1",
        audio_track_id="1",
        subtitle_track_id=None,
        position_ticks=123_000_000,
        playback_session_id="play-1",
        user_session_id="session-1",
    )


def _query(url: str) -> list[tuple[str, str]]:
    return parse_qsl(urlsplit(url).query)


class TestInterface:
    def test_implements_port(self, client: JellyfinClient) -> None:
        assert isinstance(client, IMediaServerClient)
        assert client.server_url == BASE_URL


class TestBuildPlaybackRequest:
    def _build(self, client: JellyfinClient, **overrides):
        kwargs = dict(
            access_token="token",
            media_id="src-1",
            video_track_id="0",
            audio_track_id="1",
            subtitle_track_id=None,
            bitrate_bits=8_000_000,
            playback_session_id="play-1",
        )
        kwargs.update(overrides)
        return client.build_playback_request(**kwargs)

    def test_stream_url_and_header(self, client: JellyfinClient) -> None:
        handle = self._build(client)

        assert handle.url.startswith(f"{BASE_URL}/Videos/src-1/main.m3u8?")
        assert handle.headers == {"X-MediaBrowser-Token": "token"}
        params = dict(_query(handle.url))
        assert params["playSessionID"] == "play-1"
        assert params["mediaSourceID"] == "src-1"
        assert params["audioStreamIndex"] == "1"
        assert params["videoStreamIndex"] == "0"
        assert params["videoBitRate"] == "8000000"
        assert params["videoCodec"] == "hevc,h264"
        assert params["segmentContainer"] == "mp4"
        assert "subtitleStreamIndex" not in params

    def test_subtitles_are_burned_in(self, client: JellyfinClient) -> None:
        params = dict(_query(self._build(client, subtitle_track_id="3").url))

        assert params["SubtitleMethod"] == "Encode"
        assert params["subtitleStreamIndex"] == "3"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"bitrate_bits": 0},
            {"bitrate_bits": -1},
            {"bitrate_bits": None},
            {"media_id": ""},
            {"access_token": ""},
            {"video_track_id": ""},
        ],
    )
    def test_invalid_parameters_return_none(self, client: JellyfinClient, overrides) -> None:
        assert self._build(client, **overrides) is None


class TestImageUrl:
    def test_image_url(self, client: JellyfinClient) -> None:
        url = client.get_image_url(ImageKind.BACKDROP, "item-1", 1920)

        assert url == f"{BASE_URL}/Items/item-1/Images/Backdrop?fillWidth=1920&quality=95"

    def test_invalid(self, client: JellyfinClient) -> None:
        assert client.get_image_url(ImageKind.LOGO, "", 100) is None
        assert client.get_image_url(ImageKind.LOGO, "item", 0) is None


class TestReportPlaybackEvent:
    @pytest.mark.parametrize(
        "event, path, is_paused",
        [
            (PlaybackEvent.STARTED, "/Sessions/Playing", False),
            (PlaybackEvent.PROGRESSED, "/Sessions/Playing/Progress", False),
            (PlaybackEvent.PAUSED, "/Sessions/Playing/Progress", True),
            (PlaybackEvent.STOPPED, "/Sessions/Playing/Stopped", False),
        ],
    )
    @pytest.mark.asyncio
    @respx.mock
    async def test_routes_and_body(self, client, report, event, path, is_paused) -> None:
        route = respx.post(f"{BASE_URL}{path}").mock(return_value=httpx.Response(204))

        await client.report_playback_event(event, report, "token")

        assert route.called
        request = route.calls.last.request
        assert request.headers["X-MediaBrowser-Token"] == "token"
        body = json.loads(request.content)
        assert body == {
            "ItemId": "ep-1",
            "MediaSourceId": "src-ep-1",
            "AudioStreamIndex": "1",
            "SubtitleStreamIndex": "-1",
            "PositionTicks": 123_000_000,
            "PlaySessionId": "play-1",
            "SessionId": "session-1",
            "IsPaused": is_paused,
        }
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_raises_without_retry(self, client, report) -> None:
        route = respx.post(f"{BASE_URL}/Sessions/Playing/Progress").mock(return_value=httpx.Response(503))

        with pytest.raises(MediaServerError) as exc_info:
            await client.report_playback_event(PlaybackEvent.PROGRESSED, report, "token")

        assert exc_info.value.status_code == 503
        assert route.call_count == 1
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_error_raises(self, client, report) -> None:
        respx.post(f"{BASE_URL}/Sessions/Playing").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(MediaServerError) as exc_info:
            await client.report_playback_event(PlaybackEvent.STARTED, report, "token")

        assert exc_info.value.status_code is None
        await client.close()


class TestReads:
    @pytest.mark.asyncio
    @respx.mock
    async def test_get_seasons(self, client) -> None:
        route = respx.get(f"{BASE_URL}/Shows/series-1/Episodes").mock(
            return_value=httpx.Response(200, json=JELLYFIN_EPISODES_RESPONSE)
        )

        seasons = await client.get_seasons("series-1", "token")

        assert [s.title for s in seasons] == ["Season 1", "Special", "Season 1 Cont.", "Season 2"]
        request = route.calls.last.request
        assert request.headers["X-MediaBrowser-Token"] == "token"
        assert _query(str(request.url)) == [
            ("fields", "MediaSources"),
            ("fields", "Overview"),
            ("sortBy", "AiredEpisodeOrder"),
        ]
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_seasons_retries_on_rate_limit(self, client) -> None:
        route = respx.get(f"{BASE_URL}/Shows/series-1/Episodes").mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "1"}),
                httpx.Response(200, json=JELLYFIN_EPISODES_RESPONSE),
            ]
        )

        seasons = await client.get_seasons("series-1", "token")

        assert route.call_count == 2
        assert len(seasons) == 4
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_seasons_missing_items(self, client) -> None:
        respx.get(f"{BASE_URL}/Shows/series-1/Episodes").mock(return_value=httpx.Response(200, json={"Foo": []}))

        with pytest.raises(DecodeError):
            await client.get_seasons("series-1", "token")
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_seasons_not_found(self, client) -> None:
        respx.get(f"{BASE_URL}/Shows/missing/Episodes").mock(return_value=httpx.Response(404))

        with pytest.raises(MediaServerError) as exc_info:
            await client.get_seasons("missing", "token")

        assert exc_info.value.status_code == 404
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_rejected_token(self, client) -> None:
        respx.get(f"{BASE_URL}/Shows/series-1/Episodes").mock(return_value=httpx.Response(401))

        with pytest.raises(AuthenticationError):
            await client.get_seasons("series-1", "bad-token")
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_item(self, client) -> None:
        respx.get(f"{BASE_URL}/Users/user-1/Items/movie-1").mock(
            return_value=httpx.Response(200, json=JELLYFIN_MOVIE_RESPONSE)
        )

        movie = await client.get_item("movie-1", "user-1", "token")

        assert movie.title == "Big Buck Bunny"
        assert movie.media_sources[0].id == "movie-1"
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_non_json_response(self, client) -> None:
        respx.get(f"{BASE_URL}/Users/user-1/Items/movie-1").mock(
            return_value=httpx.Response(200, text="<html>proxy error</html>")
        )

        with pytest.raises(DecodeError):
            await client.get_item("movie-1", "user-1", "token")
        await client.close()


class TestAuthenticate:
    @pytest.mark.asyncio
    @respx.mock
    async def test_login(self, client) -> None:
        route = respx.post(f"{BASE_URL}/Users/AuthenticateByName").mock(
            return_value=httpx.Response(200, json=JELLYFIN_LOGIN_RESPONSE)
        )

        result = await client.authenticate("alice", "secret")

        assert result.access_token == "access-token-1"
        request = route.calls.last.request
        assert json.loads(request.content) == {"Username": "alice", "Pw": "secret"}
        authorization = request.headers["X-Emby-Authorization"]
        assert authorization.startswith("MediaBrowser Client=")
        assert 'DeviceId="device-1"' in authorization
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_bad_credentials(self, client) -> None:
        respx.post(f"{BASE_URL}/Users/AuthenticateByName").mock(return_value=httpx.Response(401))

        with pytest.raises(AuthenticationError) as exc_info:
            await client.authenticate("alice", "wrong")

        assert exc_info.value.status_code == 401
        await client.close()

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error(self, client) -> None:
        respx.post(f"{BASE_URL}/Users/AuthenticateByName").mock(return_value=httpx.Response(500))

        with pytest.raises(MediaServerError) as exc_info:
            await client.authenticate("alice", "secret")

        assert not isinstance(exc_info.value, AuthenticationError)
        await client.close()


class TestClose:
    @pytest.mark.asyncio
    async def test_close_without_client(self, client) -> None:
        await client.close()

    @pytest.mark.asyncio
    async def test_client_is_reused(self, client) -> None:
        first = await client._get_client()
        second = await client._get_client()

        assert first is second
        await client.close()
        assert client._client is None

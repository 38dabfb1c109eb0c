"""
Tests unitaires pour le retry des lectures sur le serveur media.

Ces tests verifient:
- RateLimitError capture le header Retry-After
- with_retry relance sur 429 et 503, pas sur les autres erreurs
- request_with_retry detecte les 429/503 et relance automatiquement
"""

import httpx
import pytest
import respx

from stingray.adapters.api.retry import (
    RateLimitError,
    ServerBusyError,
    _parse_retry_after,
    request_with_retry,
    with_retry,
)

URL = "http://jellyfin.test/Shows/series-1/Episodes"


class TestErrors:
    def test_rate_limit_error_stores_retry_after(self) -> None:
        error = RateLimitError(retry_after=60)
        assert error.retry_after == 60
        assert "60" in str(error)

    def test_server_busy_message(self) -> None:
        assert "503" in str(ServerBusyError())

    @pytest.mark.parametrize(
        "value, expected",
        [("30", 30), (None, None), ("Wed, 21 Oct 2015 07:28:00 GMT", None)],
    )
    def test_parse_retry_after(self, value, expected) -> None:
        assert _parse_retry_after(value) == expected


class TestWithRetryDecorator:
    @pytest.mark.asyncio
    async def test_retries_on_server_busy(self) -> None:
        """with_retry relance quand le serveur est indisponible."""
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def flaky() -> str:
            nonlocal call_count
            call_count += 1
            if call_count < 2:
                raise ServerBusyError()
            return "ok"

        assert await flaky() == "ok"
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_stops_after_max_attempts(self) -> None:
        call_count = 0

        @with_retry(max_attempts=2, max_wait=1)
        async def always_limited() -> str:
            nonlocal call_count
            call_count += 1
            raise RateLimitError(retry_after=1)

        with pytest.raises(RateLimitError):
            await always_limited()
        assert call_count == 2

    @pytest.mark.asyncio
    async def test_does_not_retry_other_exceptions(self) -> None:
        call_count = 0

        @with_retry(max_attempts=3, max_wait=1)
        async def broken() -> str:
            nonlocal call_count
            call_count += 1
            raise ValueError("not retryable")

        with pytest.raises(ValueError):
            await broken()
        assert call_count == 1


class TestRequestWithRetry:
    @pytest.mark.asyncio
    @respx.mock
    async def test_passes_on_success(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(return_value=httpx.Response(200, json={"Items": []}))

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL)

        assert response.json() == {"Items": []}
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_retries_503_then_succeeds(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(
            side_effect=[httpx.Response(503), httpx.Response(200, json={"Items": []})]
        )

        async with httpx.AsyncClient() as client:
            response = await request_with_retry(client, "GET", URL, max_attempts=3)

        assert response.status_code == 200
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_raises_rate_limit_after_exhaustion(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(
            return_value=httpx.Response(429, headers={"Retry-After": "30"})
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(RateLimitError) as exc_info:
                await request_with_retry(client, "GET", URL, max_attempts=2)

        assert exc_info.value.retry_after == 30
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_other_errors_are_not_retried(self, respx_mock: respx.Router) -> None:
        route = respx_mock.get(URL).mock(return_value=httpx.Response(500, text="boom"))

        async with httpx.AsyncClient() as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await request_with_retry(client, "GET", URL)

        assert exc_info.value.response.status_code == 500
        assert route.call_count == 1

"""Tests for RetryTransport (per-attempt deadline + fixed-delay retry)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from sakura_danmaku.infrastructure.http.retry_transport import RetryTransport

_SLEEP = "sakura_danmaku.infrastructure.http.retry_transport.asyncio.sleep"


def _make_response(status: int = 200, body: bytes = b"{}") -> httpx.Response:
    """Build an httpx.Response for transport-level tests."""
    return httpx.Response(status_code=status, content=body)


def _make_request(url: str = "https://example.com/api") -> httpx.Request:
    return httpx.Request("GET", url)


def _make_transport(
    side_effect: list[object] | None = None,
    *,
    return_value: httpx.Response | None = None,
    max_retries: int = 1,
    retry_delay: float = 2.0,
    request_timeout: float | None = 30.0,
) -> RetryTransport:
    """Create a RetryTransport with a mock inner transport."""
    mock_wrapped = AsyncMock(spec=httpx.AsyncBaseTransport)
    if side_effect is not None:
        mock_wrapped.handle_async_request = AsyncMock(side_effect=side_effect)
    else:
        mock_wrapped.handle_async_request = AsyncMock(return_value=return_value)
    return RetryTransport(
        wrapped=mock_wrapped,
        max_retries=max_retries,
        retry_delay=retry_delay,
        request_timeout=request_timeout,
    )


class TestRetryTransport:
    @pytest.mark.asyncio()
    async def test_passes_through_successful_response(self) -> None:
        transport = _make_transport(return_value=_make_response(200, b"ok"))
        with patch(_SLEEP, new_callable=AsyncMock) as sleep:
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 200
        assert resp.content == b"ok"
        sleep.assert_not_awaited()
        assert transport._wrapped.handle_async_request.call_count == 1

    @pytest.mark.asyncio()
    async def test_connect_error_once_then_succeeds(self) -> None:
        transport = _make_transport(
            [httpx.ConnectError("refused"), _make_response(200)]
        )
        with patch(_SLEEP, new_callable=AsyncMock) as sleep:
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 200
        sleep.assert_awaited_once_with(2.0)
        assert transport._wrapped.handle_async_request.call_count == 2

    @pytest.mark.asyncio()
    async def test_gives_up_after_one_retry(self) -> None:
        transport = _make_transport(
            [httpx.ConnectError("refused"), httpx.ConnectError("refused again")]
        )
        with patch(_SLEEP, new_callable=AsyncMock) as sleep:
            with pytest.raises(httpx.ConnectError, match="refused again"):
                await transport.handle_async_request(_make_request())

        # 1 retry + 1 initial = 2 total attempts, 1 sleep
        assert transport._wrapped.handle_async_request.call_count == 2
        assert sleep.await_count == 1

    @pytest.mark.asyncio()
    async def test_retries_on_server_error_then_succeeds(self) -> None:
        transport = _make_transport([_make_response(503), _make_response(200)])
        with patch(_SLEEP, new_callable=AsyncMock) as sleep:
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 200
        assert sleep.await_count == 1

    @pytest.mark.asyncio()
    async def test_returns_last_server_error_when_exhausted(self) -> None:
        transport = _make_transport([_make_response(500), _make_response(502)])
        with patch(_SLEEP, new_callable=AsyncMock):
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 502
        assert transport._wrapped.handle_async_request.call_count == 2

    @pytest.mark.asyncio()
    async def test_client_errors_are_not_retried(self) -> None:
        transport = _make_transport([_make_response(404)])
        with patch(_SLEEP, new_callable=AsyncMock) as sleep:
            resp = await transport.handle_async_request(_make_request())

        assert resp.status_code == 404
        sleep.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_zero_retries_fails_immediately(self) -> None:
        transport = _make_transport(
            [httpx.ReadError("reset")], max_retries=0
        )
        with pytest.raises(httpx.ReadError):
            await transport.handle_async_request(_make_request())
        assert transport._wrapped.handle_async_request.call_count == 1

    @pytest.mark.asyncio()
    async def test_slow_attempt_raises_timeout(self) -> None:
        async def _hang(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(10)
            return _make_response(200)  # pragma: no cover

        transport = RetryTransport(
            httpx.MockTransport(_hang),
            max_retries=0,
            request_timeout=0.05,
        )
        with pytest.raises(httpx.TimeoutException):
            await transport.handle_async_request(_make_request())

    @pytest.mark.asyncio()
    async def test_timeout_is_retried(self) -> None:
        calls = 0

        async def _slow_then_fast(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            if calls == 1:
                await asyncio.sleep(10)
            return _make_response(200)

        transport = RetryTransport(
            httpx.MockTransport(_slow_then_fast),
            max_retries=1,
            retry_delay=0.0,
            request_timeout=0.05,
        )
        resp = await transport.handle_async_request(_make_request())
        assert resp.status_code == 200
        assert calls == 2

    @pytest.mark.asyncio()
    async def test_cancellation_is_not_retried(self) -> None:
        started = asyncio.Event()

        async def _hang(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return _make_response(200)  # pragma: no cover

        handler = AsyncMock(side_effect=_hang)
        transport = RetryTransport(
            httpx.MockTransport(handler), max_retries=1, retry_delay=0.0
        )
        task = asyncio.create_task(transport.handle_async_request(_make_request()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert handler.await_count == 1

    @pytest.mark.asyncio()
    async def test_aclose_closes_wrapped(self) -> None:
        transport = _make_transport(return_value=_make_response(200))
        await transport.aclose()
        transport._wrapped.aclose.assert_awaited_once()

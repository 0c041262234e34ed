"""httpx transport with a per-attempt deadline and fixed-delay retry."""

from __future__ import annotations

import asyncio

import httpx
import structlog

log = structlog.get_logger(__name__)

_DEFAULT_RETRYABLE = frozenset({429, 500, 502, 503, 504})


class RetryTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx transport with a request deadline and retry.

    **Deadline:** each attempt (send + body read) must finish within
    *request_timeout* seconds, otherwise ``httpx.TimeoutException`` is
    raised for that attempt.

    **Retry:** on transport errors (connection failures, timeouts) and on
    retryable HTTP status codes, waits *retry_delay* seconds and retries
    up to *max_retries* times. The last failure is raised (or the last
    retryable response returned) unchanged.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 1,
        retry_delay: float = 2.0,
        request_timeout: float | None = 30.0,
        retryable_status_codes: frozenset[int] = _DEFAULT_RETRYABLE,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._request_timeout = request_timeout
        self._retryable = retryable_status_codes

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send *request* through the wrapped transport, retrying on failure."""
        for attempt in range(1 + self._max_retries):
            is_last = attempt == self._max_retries
            try:
                response = await self._send_with_deadline(request)
            except httpx.TransportError as exc:
                if is_last:
                    raise
                self._log_retry(request, attempt, error=type(exc).__name__)
                await asyncio.sleep(self._retry_delay)
                continue

            if response.status_code not in self._retryable or is_last:
                return response

            await response.aclose()
            self._log_retry(request, attempt, status=response.status_code)
            await asyncio.sleep(self._retry_delay)

        # Unreachable, but satisfies type checker
        raise AssertionError("retry loop exited without a result")  # pragma: no cover

    async def _send_with_deadline(self, request: httpx.Request) -> httpx.Response:
        if self._request_timeout is None:
            return await self._send_and_read(request)
        try:
            return await asyncio.wait_for(
                self._send_and_read(request), timeout=self._request_timeout
            )
        except asyncio.TimeoutError:
            raise httpx.TimeoutException(
                f"Request exceeded {self._request_timeout}s", request=request
            ) from None

    async def _send_and_read(self, request: httpx.Request) -> httpx.Response:
        response = await self._wrapped.handle_async_request(request)
        try:
            await response.aread()
        except BaseException:
            await response.aclose()
            raise
        return response

    def _log_retry(self, request: httpx.Request, attempt: int, **context: object) -> None:
        log.info(
            "http_retry",
            url=str(request.url),
            attempt=attempt + 1,
            delay=self._retry_delay,
            **context,
        )

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._wrapped.aclose()

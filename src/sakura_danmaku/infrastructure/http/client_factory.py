"""Construction of the long-lived httpx client used by danmaku providers."""

from __future__ import annotations

import httpx
import structlog

from sakura_danmaku.infrastructure.config.schema import DandanplayConfig

from .retry_transport import RetryTransport

log = structlog.get_logger(__name__)


async def _log_request(request: httpx.Request) -> None:
    log.info("http_request", method=request.method, url=str(request.url))


async def _log_response(response: httpx.Response) -> None:
    log.info(
        "http_response",
        method=response.request.method,
        url=str(response.request.url),
        status=response.status_code,
    )


def _default_headers(config: DandanplayConfig) -> dict[str, str]:
    headers = {
        "User-Agent": config.user_agent,
        "Accept": "application/json",
    }
    if config.app_id and config.app_secret:
        headers["X-AppId"] = config.app_id
        headers["X-AppSecret"] = config.app_secret
    return headers


def create_default_http_client(
    config: DandanplayConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build an ``AsyncClient`` with the provider's retry and timeout policy.

    *transport* replaces the real network transport (tests pass an
    ``httpx.MockTransport``); retry and deadline handling still wrap it.
    """
    retry = RetryTransport(
        wrapped=transport or httpx.AsyncHTTPTransport(),
        max_retries=config.max_retries,
        retry_delay=config.retry_delay_seconds,
        request_timeout=config.request_timeout_seconds,
    )
    client = httpx.AsyncClient(
        transport=retry,
        timeout=httpx.Timeout(
            config.request_timeout_seconds,
            connect=config.connect_timeout_seconds,
        ),
        headers=_default_headers(config),
        follow_redirects=True,
        event_hooks={"request": [_log_request], "response": [_log_response]},
    )
    log.debug(
        "http_client_created",
        base_url=config.base_url,
        max_retries=config.max_retries,
        request_timeout=config.request_timeout_seconds,
        connect_timeout=config.connect_timeout_seconds,
    )
    return client

"""dandanplay danmaku provider and its factory."""

from __future__ import annotations

from concurrent.futures import Executor
from functools import partial
from types import TracebackType

import httpx
import structlog

from sakura_danmaku.domain.danmaku.exceptions import ProviderClosedError
from sakura_danmaku.infrastructure.config.schema import DandanplayConfig
from sakura_danmaku.infrastructure.danmaku.session import (
    TimeBasedDanmakuSession,
    build_session,
)
from sakura_danmaku.infrastructure.http.client_factory import create_default_http_client

from .client import DandanplayClient
from .comments import comment_to_danmaku_or_none
from .normalizer import normalize_episode_name

log = structlog.get_logger(__name__)

DANDANPLAY_PROVIDER_ID = "弹弹play"


class DandanplayDanmakuProvider:
    """Fetches danmaku sessions from dandanplay.

    Owns one ``httpx.AsyncClient`` for its whole lifetime. ``close()``
    releases it and may be called more than once; ``fetch()`` after
    ``close()`` raises ``ProviderClosedError``.
    """

    def __init__(
        self,
        config: DandanplayConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        executor: Executor | None = None,
    ) -> None:
        self._config = config or DandanplayConfig()
        self._http = http_client or create_default_http_client(self._config)
        self._client = DandanplayClient(self._http, base_url=self._config.base_url)
        self._executor = executor
        self._closed = False

    @property
    def id(self) -> str:
        return DANDANPLAY_PROVIDER_ID

    @property
    def closed(self) -> bool:
        return self._closed

    async def fetch(
        self, subject_name: str, episode_name: str | None
    ) -> TimeBasedDanmakuSession | None:
        """Resolve and download danmaku for one episode.

        Returns ``None`` when the episode label is not supported or the
        service has no match. Raises ``DanmakuTransportError`` when the
        service cannot be reached.
        """
        if self._closed:
            raise ProviderClosedError(f"{self.id} provider is closed")

        token = normalize_episode_name(episode_name)
        if token is None:
            log.debug("danmaku_episode_skipped", subject=subject_name, episode=episode_name)
            return None

        result = await self._client.search_episodes(subject_name, token)
        if not result.success or not result.animes:
            log.info(
                "danmaku_search_miss",
                subject=subject_name,
                episode=token,
                success=result.success,
                error_code=result.error_code,
            )
            return None

        episodes = result.animes[0].episodes
        if not episodes:
            log.info("danmaku_no_episodes", subject=subject_name, episode=token)
            return None

        try:
            episode_id = int(episodes[0].episode_id)
        except ValueError:
            log.warning(
                "danmaku_bad_episode_id",
                subject=subject_name,
                episode_id=episodes[0].episode_id,
            )
            return None

        return await self._create_session(episode_id)

    async def _create_session(self, episode_id: int) -> TimeBasedDanmakuSession:
        raw = await self._client.get_comments(
            episode_id,
            with_related=self._config.with_related,
            ch_convert=self._config.ch_convert,
        )
        session = await build_session(
            raw,
            partial(comment_to_danmaku_or_none, provider_id=self.id),
            executor=self._executor,
        )
        log.info(
            "danmaku_session_built",
            episode_id=episode_id,
            raw=len(raw),
            kept=len(session),
        )
        return session

    async def close(self) -> None:
        """Close the HTTP client. Subsequent calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        await self._http.aclose()

    async def __aenter__(self) -> DandanplayDanmakuProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


class DandanplayDanmakuProviderFactory:
    """Creates independently-owned :class:`DandanplayDanmakuProvider` instances."""

    def __init__(self, config: DandanplayConfig | None = None) -> None:
        self._config = config or DandanplayConfig()

    @property
    def id(self) -> str:
        return DANDANPLAY_PROVIDER_ID

    def create(self) -> DandanplayDanmakuProvider:
        return DandanplayDanmakuProvider(self._config)

"""LoadDanmakuUseCase: what a player calls when an episode starts."""

from __future__ import annotations

import structlog

from sakura_danmaku.domain.danmaku.exceptions import DanmakuTransportError
from sakura_danmaku.domain.entities.danmaku import EpisodeQuery
from sakura_danmaku.domain.ports.danmaku_provider import DanmakuProviderPort
from sakura_danmaku.domain.ports.danmaku_session import DanmakuSessionPort

log = structlog.get_logger(__name__)


class LoadDanmakuUseCase:
    """Loads the danmaku session for an episode through one provider.

    Transport failures are collapsed into "no danmaku" (logged) unless
    *raise_on_transport_error* is set, so a player can choose to retry
    later instead. Cancellation always propagates.
    """

    def __init__(
        self,
        *,
        provider: DanmakuProviderPort,
        raise_on_transport_error: bool = False,
    ) -> None:
        self._provider = provider
        self._raise_on_transport_error = raise_on_transport_error

    async def execute(self, query: EpisodeQuery) -> DanmakuSessionPort | None:
        structlog.contextvars.bind_contextvars(
            danmaku_provider=self._provider.id,
            subject=query.subject_name,
        )
        try:
            session = await self._provider.fetch(
                query.subject_name, query.raw_episode_name
            )
        except DanmakuTransportError as exc:
            if self._raise_on_transport_error:
                raise
            log.warning(
                "danmaku_unavailable",
                episode=query.raw_episode_name,
                url=exc.url,
                status=exc.status_code,
                exc_info=True,
            )
            return None
        finally:
            structlog.contextvars.unbind_contextvars("danmaku_provider", "subject")

        if session is None:
            log.info("danmaku_not_found", episode=query.raw_episode_name)
        else:
            log.info("danmaku_loaded", episode=query.raw_episode_name, count=len(session))
        return session

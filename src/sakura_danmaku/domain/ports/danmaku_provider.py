"""Ports for danmaku providers and their factories."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .danmaku_session import DanmakuSessionPort


@runtime_checkable
class DanmakuProviderPort(Protocol):
    """Async source of danmaku sessions for a (subject, episode) pair.

    ``fetch`` returns ``None`` when no danmaku exist for the content
    (unsupported episode label or remote miss). Transport failures raise
    ``DanmakuTransportError``.
    """

    @property
    def id(self) -> str: ...

    async def fetch(
        self, subject_name: str, episode_name: str | None
    ) -> DanmakuSessionPort | None: ...

    async def close(self) -> None: ...


@runtime_checkable
class DanmakuProviderFactoryPort(Protocol):
    """Creates independently-owned provider instances."""

    @property
    def id(self) -> str: ...

    def create(self) -> DanmakuProviderPort: ...

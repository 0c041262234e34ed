"""Static registry of danmaku provider factories.

Populated explicitly at process start (:func:`build_default_registry`);
there is no import-time or reflection-based discovery.
"""

from __future__ import annotations

import structlog

from sakura_danmaku.domain.danmaku.exceptions import (
    DuplicateProviderError,
    ProviderNotFoundError,
)
from sakura_danmaku.domain.ports.danmaku_provider import (
    DanmakuProviderFactoryPort,
    DanmakuProviderPort,
)
from sakura_danmaku.infrastructure.config.schema import AppConfig
from sakura_danmaku.infrastructure.dandanplay.provider import (
    DandanplayDanmakuProviderFactory,
)

log = structlog.get_logger(__name__)


class DanmakuProviderRegistry:
    """Maps provider ids to factories."""

    def __init__(
        self, factories: list[DanmakuProviderFactoryPort] | None = None
    ) -> None:
        self._factories: dict[str, DanmakuProviderFactoryPort] = {}
        for factory in factories or []:
            self.register(factory)

    def register(self, factory: DanmakuProviderFactoryPort) -> None:
        """Register *factory* under its ``id``.

        Raises ``DuplicateProviderError`` if the id is already taken.
        """
        if factory.id in self._factories:
            raise DuplicateProviderError(
                f"Danmaku provider already registered: {factory.id!r}"
            )
        self._factories[factory.id] = factory
        log.debug("danmaku_provider_registered", provider=factory.id)

    def list_ids(self) -> list[str]:
        return list(self._factories)

    def get(self, provider_id: str) -> DanmakuProviderFactoryPort:
        try:
            return self._factories[provider_id]
        except KeyError:
            raise ProviderNotFoundError(
                f"Unknown danmaku provider: {provider_id!r}"
            ) from None

    def create(self, provider_id: str) -> DanmakuProviderPort:
        """Create a fresh provider instance; the caller owns and closes it."""
        return self.get(provider_id).create()

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._factories

    def __len__(self) -> int:
        return len(self._factories)


def build_default_registry(config: AppConfig | None = None) -> DanmakuProviderRegistry:
    """Registry with every built-in provider."""
    config = config or AppConfig()
    return DanmakuProviderRegistry(
        [DandanplayDanmakuProviderFactory(config.dandanplay)],
    )

"""Port for a time-indexed danmaku session."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from sakura_danmaku.domain.entities.danmaku import Danmaku


@runtime_checkable
class DanmakuSessionPort(Protocol):
    """Immutable, time-ordered collection of comments for one episode."""

    def __len__(self) -> int: ...
    def __iter__(self) -> Iterator[Danmaku]: ...

    @property
    def total_duration_ms(self) -> int: ...

    def at(self, time_ms: int, window_ms: int = ...) -> list[Danmaku]:
        """Comments that became visible in ``(time_ms - window_ms, time_ms]``."""
        ...

    def between(self, start_ms: int, end_ms: int) -> list[Danmaku]:
        """Comments with ``start_ms <= play_time_ms < end_ms``."""
        ...

    def release(self) -> None: ...

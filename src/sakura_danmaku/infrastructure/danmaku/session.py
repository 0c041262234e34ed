"""Time-indexed danmaku session.

Sorting and parsing a large comment list is CPU-bound, so both run in an
executor; the event loop only awaits the finished session.
"""

from __future__ import annotations

import asyncio
from bisect import bisect_left, bisect_right
from collections.abc import Callable, Iterable, Iterator, Mapping
from concurrent.futures import Executor
from typing import Any, Union

import structlog

from sakura_danmaku.domain.entities.danmaku import Danmaku, RawComment

log = structlog.get_logger(__name__)

# How far back `at()` looks by default (ms).
DEFAULT_WINDOW_MS = 1_000

_Raw = Union[RawComment, Mapping[str, Any]]


class TimeBasedDanmakuSession:
    """Immutable, time-ascending sequence of comments.

    Not instantiated with unsorted data directly; use :meth:`create`
    or :func:`build_session`.
    """

    __slots__ = ("_items", "_times")

    def __init__(self, items: tuple[Danmaku, ...]) -> None:
        self._items = items
        self._times = [d.play_time_ms for d in items]

    @classmethod
    def from_unsorted(cls, danmaku: Iterable[Danmaku]) -> TimeBasedDanmakuSession:
        """Sort synchronously (stable by play time)."""
        return cls(tuple(sorted(danmaku, key=lambda d: d.play_time_ms)))

    @classmethod
    async def create(
        cls,
        danmaku: Iterable[Danmaku],
        *,
        executor: Executor | None = None,
    ) -> TimeBasedDanmakuSession:
        """Build a session in *executor* (default pool when ``None``)."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(executor, cls.from_unsorted, list(danmaku))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Danmaku]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={len(self._items)})"

    @property
    def total_duration_ms(self) -> int:
        return self._times[-1] if self._times else 0

    def at(self, time_ms: int, window_ms: int = DEFAULT_WINDOW_MS) -> list[Danmaku]:
        """Comments that became visible in ``(time_ms - window_ms, time_ms]``."""
        lo = bisect_right(self._times, time_ms - window_ms)
        hi = bisect_right(self._times, time_ms)
        return list(self._items[lo:hi])

    def between(self, start_ms: int, end_ms: int) -> list[Danmaku]:
        """Comments with ``start_ms <= play_time_ms < end_ms``."""
        if end_ms <= start_ms:
            return []
        lo = bisect_left(self._times, start_ms)
        hi = bisect_left(self._times, end_ms)
        return list(self._items[lo:hi])

    def release(self) -> None:
        """Drop the comment list once playback has ended."""
        self._items = ()
        self._times = []


def _parse_and_sort(
    raw_comments: list[_Raw],
    parse: Callable[[_Raw], Danmaku | None],
) -> TimeBasedDanmakuSession:
    parsed = [d for d in map(parse, raw_comments) if d is not None]
    dropped = len(raw_comments) - len(parsed)
    if dropped:
        log.debug("danmaku_malformed_dropped", total=len(raw_comments), dropped=dropped)
    return TimeBasedDanmakuSession.from_unsorted(parsed)


async def build_session(
    raw_comments: Iterable[_Raw],
    parse: Callable[[_Raw], Danmaku | None],
    *,
    executor: Executor | None = None,
) -> TimeBasedDanmakuSession:
    """Parse, filter and sort *raw_comments* off the event loop.

    *parse* returns ``None`` for a malformed comment, which is dropped;
    building never fails because of individual comments.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        executor, _parse_and_sort, list(raw_comments), parse
    )

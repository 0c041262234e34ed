"""Domain entities for danmaku acquisition.

Pure value objects: no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DanmakuLocation(str, Enum):
    """Where a comment is drawn on the player overlay."""

    NORMAL = "normal"  # scrolling right-to-left
    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def from_mode(cls, mode: int) -> DanmakuLocation:
        """Map a dandanplay/bilibili mode number to a location.

        4 is bottom-fixed, 5 is top-fixed; everything else scrolls.
        """
        if mode == 4:
            return cls.BOTTOM
        if mode == 5:
            return cls.TOP
        return cls.NORMAL


@dataclass(frozen=True)
class EpisodeQuery:
    """One fetch request as issued by the player UI."""

    subject_name: str
    raw_episode_name: str | None = None


@dataclass(frozen=True)
class EpisodeMatch:
    """An episode returned by the remote episode search."""

    episode_id: str  # numeric string, fits in a signed 64-bit int
    episode_title: str = ""


@dataclass(frozen=True)
class AnimeMatch:
    """An anime returned by the remote episode search."""

    anime_id: int = 0
    anime_title: str = ""
    type: str = ""
    episodes: tuple[EpisodeMatch, ...] = ()


@dataclass(frozen=True)
class SearchEpisodesResult:
    """Result of the remote episode search.

    A transport-level success may still carry ``success=False`` or an
    empty ``animes`` tuple; both mean "no usable data".
    """

    success: bool
    animes: tuple[AnimeMatch, ...] = ()
    error_code: int = 0
    error_message: str = ""
    has_more: bool = False


@dataclass(frozen=True)
class RawComment:
    """A comment exactly as delivered by the remote service.

    ``p`` is ``"<seconds>,<mode>,<color>,<sender>"``, ``m`` is the text.
    Nothing is validated here; parsing happens when a session is built.
    """

    cid: int | str | None
    p: str | None
    m: str | None


@dataclass(frozen=True)
class Danmaku:
    """A parsed comment ready for the overlay."""

    id: str
    provider_id: str
    play_time_ms: int
    sender_id: str
    location: DanmakuLocation
    text: str
    color: int = 0xFFFFFF

from .danmaku import (
    AnimeMatch,
    Danmaku,
    DanmakuLocation,
    EpisodeMatch,
    EpisodeQuery,
    RawComment,
    SearchEpisodesResult,
)

__all__ = [
    "AnimeMatch",
    "Danmaku",
    "DanmakuLocation",
    "EpisodeMatch",
    "EpisodeQuery",
    "RawComment",
    "SearchEpisodesResult",
]

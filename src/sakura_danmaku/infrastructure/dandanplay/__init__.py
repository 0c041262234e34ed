from .client import DandanplayClient
from .comments import comment_to_danmaku_or_none
from .normalizer import MOVIE_TOKEN, normalize_episode_name
from .provider import (
    DANDANPLAY_PROVIDER_ID,
    DandanplayDanmakuProvider,
    DandanplayDanmakuProviderFactory,
)

__all__ = [
    "DANDANPLAY_PROVIDER_ID",
    "MOVIE_TOKEN",
    "DandanplayClient",
    "DandanplayDanmakuProvider",
    "DandanplayDanmakuProviderFactory",
    "comment_to_danmaku_or_none",
    "normalize_episode_name",
]

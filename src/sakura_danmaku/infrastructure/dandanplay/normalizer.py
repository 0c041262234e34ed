"""Episode label -> dandanplay search token.

dandanplay indexes episodes by ordinal number, or by the literal
``"movie"`` for films and complete collections. Any other label is
ambiguous and must not trigger a network call.
"""

from __future__ import annotations

import re

MOVIE_TOKEN = "movie"

# 全集 = complete collection, 正片 = feature film
_MOVIE_PATTERN = re.compile(r"全集|HD|正片")
_EPISODE_MARKER = "第"  # as in 第01集
_NON_DIGIT = re.compile(r"\D")
_ALL_DIGITS = re.compile(r"\d+")


def normalize_episode_name(episode_name: str | None) -> str | None:
    """Map a raw episode label to the token dandanplay expects.

    Returns ``None`` when the label must not be queried.

    >>> normalize_episode_name("第01集")
    '01'
    >>> normalize_episode_name("剧场版HD")
    'movie'
    >>> normalize_episode_name("07")
    '07'
    >>> normalize_episode_name("OVA") is None
    True
    """
    if episode_name is None or not episode_name.strip():
        return None
    if _MOVIE_PATTERN.search(episode_name):
        return MOVIE_TOKEN
    if _EPISODE_MARKER in episode_name:
        return _NON_DIGIT.sub("", episode_name) or None
    # Some sources label TV episodes with bare numbers.
    if _ALL_DIGITS.fullmatch(episode_name):
        return episode_name
    return None

"""Parsing of raw dandanplay comments into :class:`Danmaku` records."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from sakura_danmaku.domain.entities.danmaku import Danmaku, DanmakuLocation, RawComment


def _field(raw: RawComment | Mapping[str, Any], name: str) -> Any:
    if isinstance(raw, Mapping):
        return raw.get(name)
    return getattr(raw, name, None)


def comment_to_danmaku_or_none(
    raw: RawComment | Mapping[str, Any],
    provider_id: str,
) -> Danmaku | None:
    """Parse one raw comment; ``None`` if it is not well-formed.

    ``p`` is ``"<seconds>,<mode>,<color>,<sender>"``. Never raises.
    """
    p = _field(raw, "p")
    text = _field(raw, "m")
    if not isinstance(p, str) or not isinstance(text, str) or not text.strip():
        return None

    parts = p.split(",")
    if len(parts) < 4:
        return None
    try:
        seconds = float(parts[0])
        mode = int(parts[1])
        color = int(parts[2])
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds < 0:
        return None

    cid = _field(raw, "cid")
    return Danmaku(
        id=str(cid) if cid is not None else "",
        provider_id=provider_id,
        play_time_ms=int(seconds * 1000),
        sender_id=parts[3],
        location=DanmakuLocation.from_mode(mode),
        text=text,
        color=color,
    )

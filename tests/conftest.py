"""Shared test fixtures for the sakura-danmaku test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from sakura_danmaku.domain.entities import Danmaku, DanmakuLocation
from sakura_danmaku.infrastructure.config import DandanplayConfig

BASE_URL = "https://api.dandanplay.test"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def dandanplay_config() -> DandanplayConfig:
    """dandanplay config pointing at a fake host, with no retry delay."""
    return DandanplayConfig(base_url=BASE_URL, retry_delay_seconds=0.0)


# ---------------------------------------------------------------------------
# dandanplay JSON payloads
# ---------------------------------------------------------------------------


@pytest.fixture()
def search_payload() -> dict[str, Any]:
    """Successful /search/episodes response with two animes."""
    return {
        "hasMore": False,
        "animes": [
            {
                "animeId": 17489,
                "animeTitle": "葬送的芙莉莲",
                "type": "tvseries",
                "typeDescription": "TV动画",
                "episodes": [
                    {"episodeId": 174890001, "episodeTitle": "第1话 冒险的结束"},
                    {"episodeId": 174890002, "episodeTitle": "第2话"},
                ],
            },
            {
                "animeId": 99999,
                "animeTitle": "葬送的芙莉莲 特别篇",
                "type": "ova",
                "typeDescription": "OVA",
                "episodes": [{"episodeId": 999990001, "episodeTitle": "1"}],
            },
        ],
        "errorCode": 0,
        "success": True,
        "errorMessage": "",
    }


@pytest.fixture()
def comments_payload() -> dict[str, Any]:
    """/comment/{id} response: 4 well-formed comments out of order, 3 malformed."""
    return {
        "count": 7,
        "comments": [
            {"cid": 3, "p": "12.50,1,16777215,[BiliBili]abc", "m": "third"},
            {"cid": 1, "p": "0.00,5,16711680,user1", "m": "first"},
            {"cid": 99, "p": "garbage", "m": "broken p"},
            {"cid": 2, "p": "3.25,4,65280,user2", "m": "second"},
            {"cid": 98, "p": "4.0,1,255,user3", "m": ""},
            {"cid": 4, "p": "12.50,1,255,user4", "m": "fourth"},
            {"cid": 97, "p": "nan,1,255,user5", "m": "not a number"},
        ],
    }


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


def make_danmaku(play_time_ms: int, text: str = "", cid: str = "") -> Danmaku:
    return Danmaku(
        id=cid or str(play_time_ms),
        provider_id="test",
        play_time_ms=play_time_ms,
        sender_id="sender",
        location=DanmakuLocation.NORMAL,
        text=text or f"at {play_time_ms}",
    )


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_provider() -> AsyncMock:
    """Mock DanmakuProviderPort."""
    provider = AsyncMock()
    provider.id = "mock"
    provider.fetch = AsyncMock(return_value=None)
    provider.close = AsyncMock()
    return provider


@pytest.fixture()
def danmaku_factory() -> Any:
    """Factory for Danmaku records at a given play time."""
    return make_danmaku

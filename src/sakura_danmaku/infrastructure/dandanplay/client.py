"""dandanplay API v2 client (async httpx)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from sakura_danmaku.domain.danmaku.exceptions import DanmakuTransportError
from sakura_danmaku.domain.entities.danmaku import (
    AnimeMatch,
    EpisodeMatch,
    RawComment,
    SearchEpisodesResult,
)

log = structlog.get_logger(__name__)


def _list_field(data: dict[str, Any], key: str, url: str) -> list[Any]:
    """``data[key]`` as a list; absent or null reads as empty.

    Any other shape is raised as ``DanmakuTransportError``.
    """
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        log.warning("dandanplay_unexpected_payload", field=key, got=type(value).__name__)
        raise DanmakuTransportError(
            f"dandanplay returned an unexpected payload: {key!r} is not a list",
            url=url,
        )
    return value


class DandanplayClient:
    """Two-step dandanplay lookup: episode search, then comment list.

    Retry and timeout policy belong to the ``httpx.AsyncClient`` passed
    in (see ``create_default_http_client``). Every failure that survives
    it is raised as ``DanmakuTransportError``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(url, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            log.warning("dandanplay_http_error", path=path, status=status)
            raise DanmakuTransportError(
                f"dandanplay answered HTTP {status}", url=url, status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("dandanplay_network_error", path=path, error=type(exc).__name__)
            raise DanmakuTransportError(
                f"dandanplay request failed: {exc!r}", url=url
            ) from exc

        try:
            return resp.json()
        except ValueError as exc:
            log.warning("dandanplay_invalid_json", path=path)
            raise DanmakuTransportError(
                "dandanplay returned an undecodable body",
                url=url,
                status_code=resp.status_code,
            ) from exc

    @staticmethod
    def _parse_search(data: Any, url: str) -> SearchEpisodesResult:
        if not isinstance(data, dict):
            return SearchEpisodesResult(success=False, error_message="unexpected payload")

        animes: list[AnimeMatch] = []
        for anime in _list_field(data, "animes", url):
            if not isinstance(anime, dict):
                continue
            episodes = tuple(
                EpisodeMatch(
                    episode_id=str(ep.get("episodeId", "")),
                    episode_title=ep.get("episodeTitle") or "",
                )
                for ep in _list_field(anime, "episodes", url)
                if isinstance(ep, dict) and ep.get("episodeId") is not None
            )
            animes.append(
                AnimeMatch(
                    anime_id=anime.get("animeId") or 0,
                    anime_title=anime.get("animeTitle") or "",
                    type=anime.get("type") or "",
                    episodes=episodes,
                )
            )

        return SearchEpisodesResult(
            success=bool(data.get("success", False)),
            animes=tuple(animes),
            error_code=data.get("errorCode") or 0,
            error_message=data.get("errorMessage") or "",
            has_more=bool(data.get("hasMore", False)),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def search_episodes(
        self, subject_name: str, episode: str | None = None
    ) -> SearchEpisodesResult:
        """Search episodes of *subject_name* matching the *episode* token."""
        params: dict[str, Any] = {"anime": subject_name}
        if episode:
            params["episode"] = episode
        path = "/api/v2/search/episodes"
        data = await self._get_json(path, params)
        result = self._parse_search(data, f"{self._base_url}{path}")
        log.debug(
            "dandanplay_search_done",
            subject=subject_name,
            episode=episode,
            success=result.success,
            animes=len(result.animes),
        )
        return result

    async def get_comments(
        self,
        episode_id: int,
        *,
        with_related: bool = True,
        ch_convert: int = 0,
    ) -> list[RawComment]:
        """Fetch the raw comment list for *episode_id*.

        Entries that are not JSON objects are skipped; the fields of the
        remaining ones are passed through unvalidated. A ``comments`` value
        that is not a list raises ``DanmakuTransportError``.
        """
        path = f"/api/v2/comment/{episode_id}"
        data = await self._get_json(
            path,
            {
                "withRelated": "true" if with_related else "false",
                "chConvert": ch_convert,
            },
        )
        if not isinstance(data, dict):
            return []
        comments = [
            RawComment(cid=c.get("cid"), p=c.get("p"), m=c.get("m"))
            for c in _list_field(data, "comments", f"{self._base_url}{path}")
            if isinstance(c, dict)
        ]
        log.debug("dandanplay_comments_fetched", episode_id=episode_id, count=len(comments))
        return comments

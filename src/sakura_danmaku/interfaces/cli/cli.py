from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, TextIO

import structlog

from sakura_danmaku.application.use_cases import LoadDanmakuUseCase
from sakura_danmaku.domain.danmaku.exceptions import (
    DanmakuTransportError,
    ProviderNotFoundError,
)
from sakura_danmaku.domain.entities.danmaku import Danmaku, EpisodeQuery
from sakura_danmaku.infrastructure.config import AppConfig, load_config
from sakura_danmaku.infrastructure.dandanplay.provider import DANDANPLAY_PROVIDER_ID
from sakura_danmaku.infrastructure.logging.setup import configure_logging
from sakura_danmaku.infrastructure.providers import build_default_registry

log = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_TRANSPORT_ERROR = 2
EXIT_UNKNOWN_PROVIDER = 3


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="sakura-danmaku")

    # Config wiring flags (no business logic)
    parser.add_argument("--config", default=None, help="Path to YAML config file.")
    parser.add_argument("--dotenv", default=None, help="Path to .env file.")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch danmaku for one episode.")
    fetch.add_argument("subject", help="Anime title as shown by the source.")
    fetch.add_argument(
        "episode",
        nargs="?",
        default=None,
        help="Episode label, e.g. 第01集, 07 or 全集.",
    )
    fetch.add_argument(
        "--provider",
        default=DANDANPLAY_PROVIDER_ID,
        help="Danmaku provider id.",
    )
    fetch.add_argument(
        "--at",
        type=int,
        default=None,
        help="Only print comments visible at this playback time (ms).",
    )
    fetch.add_argument(
        "--window",
        type=int,
        default=5_000,
        help="Look-back window for --at (ms).",
    )
    fetch.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Print at most N comments.",
    )

    sub.add_parser("providers", help="List registered danmaku providers.")

    return parser.parse_args(argv)


def _format_danmaku(d: Danmaku) -> str:
    minutes, rest = divmod(d.play_time_ms, 60_000)
    seconds, millis = divmod(rest, 1_000)
    return f"[{minutes:02d}:{seconds:02d}.{millis:03d}] {d.text}"


async def _run_fetch(
    args: argparse.Namespace, config: AppConfig, out: TextIO
) -> int:
    registry = build_default_registry(config)
    try:
        provider = registry.create(args.provider)
    except ProviderNotFoundError as exc:
        print(f"{exc}; available: {', '.join(registry.list_ids())}", file=sys.stderr)
        return EXIT_UNKNOWN_PROVIDER

    try:
        use_case = LoadDanmakuUseCase(provider=provider, raise_on_transport_error=True)
        try:
            session = await use_case.execute(
                EpisodeQuery(subject_name=args.subject, raw_episode_name=args.episode)
            )
        except DanmakuTransportError as exc:
            print(f"danmaku service unavailable: {exc}", file=sys.stderr)
            return EXIT_TRANSPORT_ERROR
    finally:
        await provider.close()

    if session is None:
        print("no danmaku found", file=sys.stderr)
        return EXIT_NOT_FOUND

    items = list(session) if args.at is None else session.at(args.at, args.window)
    if args.limit is not None:
        items = items[: args.limit]
    for d in items:
        print(_format_danmaku(d), file=out)
    print(f"{len(session)} comments", file=sys.stderr)
    session.release()
    return EXIT_OK


def start(argv: Iterable[str] | None = None, out: TextIO | None = None) -> int:
    """
    Process entrypoint.

    Loads config exactly once, configures logging, then dispatches the subcommand.
    """
    if argv is None:
        argv = sys.argv[1:]
    out = out or sys.stdout

    args = _parse_args(argv)

    cli_overrides: dict[str, Any] = {}
    if args.log_level:
        cli_overrides["log_level"] = args.log_level
    if args.log_format:
        cli_overrides["log_format"] = args.log_format

    config = load_config(
        config_path=Path(args.config) if args.config else None,
        dotenv_path=Path(args.dotenv) if args.dotenv else None,
        cli_overrides=cli_overrides,
    )
    configure_logging(config, stderr_only=True)

    if args.command == "providers":
        for provider_id in build_default_registry(config).list_ids():
            print(provider_id, file=out)
        return EXIT_OK

    return asyncio.run(_run_fetch(args, config, out))


if __name__ == "__main__":
    raise SystemExit(start())

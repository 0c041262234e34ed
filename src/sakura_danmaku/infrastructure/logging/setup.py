from __future__ import annotations

import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

import structlog

from sakura_danmaku.infrastructure.config.schema import AppConfig

log = structlog.get_logger(__name__)

# Third-party loggers that are too chatty at INFO.
_QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def _add_record_created_timestamp_utc(
    _: Any, __: Any, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Stamp foreign (non-structlog) LogRecords with their creation time.

    ProcessorFormatter sets event_dict["_record"] for foreign records.
    """
    record = event_dict.get("_record")
    if isinstance(record, logging.LogRecord):
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        event_dict["timestamp"] = dt.isoformat().replace("+00:00", "Z")
    return event_dict


def _renderer(config: AppConfig) -> structlog.typing.Processor:
    if config.log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def build_logging_config(
    config: AppConfig, *, stderr_only: bool = False
) -> dict[str, Any]:
    """
    Build a dictConfig that renders every stdlib record through structlog.

    DEBUG/INFO/WARNING go to stdout, ERROR/CRITICAL to stderr. With
    *stderr_only* every record goes to stderr, leaving stdout to the caller.
    """
    level = config.log_level
    cfg: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "max_warning": {
                "()": _MaxLevelFilter,
                "max_level": logging.WARNING,
            },
        },
        "formatters": {
            "structlog": {
                "()": structlog.stdlib.ProcessorFormatter,
                "foreign_pre_chain": [
                    structlog.contextvars.merge_contextvars,
                    _add_record_created_timestamp_utc,
                    structlog.stdlib.add_logger_name,
                    structlog.stdlib.add_log_level,
                ],
                "processors": [
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    _renderer(config),
                ],
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "filters": ["max_warning"],
                "stream": "ext://sys.stdout",
            },
            "errors": {
                "class": "logging.StreamHandler",
                "formatter": "structlog",
                "level": "ERROR",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            name: {"level": "WARNING" if level != "DEBUG" else level}
            for name in _QUIET_LOGGERS
        },
        "root": {"handlers": ["console", "errors"], "level": level},
    }
    if stderr_only:
        cfg["handlers"]["console"]["stream"] = "ext://sys.stderr"
    return cfg


def configure_logging(
    config: AppConfig, *, stderr_only: bool = False
) -> dict[str, Any]:
    """
    Configure structlog + stdlib logging and return the applied dictConfig.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            # structlog -> stdlib logging -> ProcessorFormatter
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    cfg = build_logging_config(config, stderr_only=stderr_only)
    logging.config.dictConfig(cfg)
    log.info(
        "logging_configured", log_format=config.log_format, log_level=config.log_level
    )
    return cfg

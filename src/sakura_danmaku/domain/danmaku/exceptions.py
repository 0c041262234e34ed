"""Danmaku acquisition exceptions."""

from __future__ import annotations


class DanmakuError(Exception):
    """Base class for all danmaku-related errors."""


class DanmakuTransportError(DanmakuError):
    """Raised when the remote service cannot be reached or answers garbage.

    Covers timeouts, connection errors, non-2xx statuses and undecodable
    bodies, after the HTTP client has exhausted its retries.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ProviderClosedError(DanmakuError):
    """Raised when ``fetch`` is called on a provider that was closed."""


class ProviderNotFoundError(DanmakuError):
    """Raised when a provider id is not known to the registry."""


class DuplicateProviderError(DanmakuError):
    """Raised when two factories are registered under the same id."""

from .exceptions import (
    DanmakuError,
    DanmakuTransportError,
    DuplicateProviderError,
    ProviderClosedError,
    ProviderNotFoundError,
)

__all__ = [
    "DanmakuError",
    "DanmakuTransportError",
    "DuplicateProviderError",
    "ProviderClosedError",
    "ProviderNotFoundError",
]

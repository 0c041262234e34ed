from .danmaku_provider import DanmakuProviderFactoryPort, DanmakuProviderPort
from .danmaku_session import DanmakuSessionPort

__all__ = [
    "DanmakuProviderFactoryPort",
    "DanmakuProviderPort",
    "DanmakuSessionPort",
]

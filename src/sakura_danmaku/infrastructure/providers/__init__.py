from .registry import DanmakuProviderRegistry, build_default_registry

__all__ = ["DanmakuProviderRegistry", "build_default_registry"]

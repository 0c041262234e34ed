from .load_danmaku import LoadDanmakuUseCase

__all__ = ["LoadDanmakuUseCase"]

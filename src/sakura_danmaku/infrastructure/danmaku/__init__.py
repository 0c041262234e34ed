from .session import TimeBasedDanmakuSession, build_session

__all__ = ["TimeBasedDanmakuSession", "build_session"]

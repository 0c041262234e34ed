"""Danmaku (timed comment) acquisition for anime playback."""

__version__ = "0.1.0"

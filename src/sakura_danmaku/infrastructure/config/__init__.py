from __future__ import annotations

from .load import load_config
from .schema import AppConfig, DandanplayConfig, EnvOverrides

__all__ = ["AppConfig", "DandanplayConfig", "EnvOverrides", "load_config"]

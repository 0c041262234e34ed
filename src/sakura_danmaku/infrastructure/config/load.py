"""Layered configuration: defaults < YAML < environment < CLI flags."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: tuple[str, ...] = ("logging", "dandanplay")
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Flat spelling (env vars, CLI flags) -> (section, key)
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    **{
        f"dandanplay_{key}": ("dandanplay", key)
        for key in (
            "base_url",
            "app_id",
            "app_secret",
            "user_agent",
            "request_timeout_seconds",
            "connect_timeout_seconds",
            "max_retries",
            "retry_delay_seconds",
        )
    },
}


def _merged(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """New dict with *override* laid over *base*; nested mappings merge."""
    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            out[key] = _merged(current, value)
        else:
            out[key] = value
    return out


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape, accepting flat keys too."""
    out: dict[str, Any] = {
        key: layer[key] for key in _TOP_LEVEL if key in layer
    }
    for section in _SECTIONS:
        value = layer.get(section)
        if isinstance(value, Mapping):
            out[section] = dict(value)
    for flat_key, (section, key) in _FLAT_KEYS.items():
        if flat_key in layer:
            out.setdefault(section, {})[key] = layer[flat_key]
    return out


def _yaml_layer(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"{path}: config YAML must be a mapping, got {type(parsed).__name__}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated :class:`AppConfig`.

    A *dotenv_path* file is loaded into the process environment first
    (without overwriting variables that are already set), so it counts
    as part of the environment layer.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [DEFAULT_CONFIG]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        merged = _merged(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)

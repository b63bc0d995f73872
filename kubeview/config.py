"""User configuration for kubeview, loaded from YAML."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .utils.logging import get_logger

LOGGER = get_logger("kubeview.config")

CONFIG_ENV_VAR = "KUBEVIEW_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/kubeview/config.yaml")


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


@dataclass(slots=True)
class ViewConfig:
    """Settings shared by every run of the selector."""

    kubectl: str = "kubectl"
    default_resource: str = "pod"
    # One binding per physical function key by default.
    column_binding_limit: int = 19
    log_chunk_size: int = 1024
    picker_height_percent: int = 30
    show_preview: bool = False
    score_cutoff: float = 60.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ViewConfig":
        known = {item.name for item in fields(cls)}
        defaults = cls()
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                LOGGER.warning("Ignoring unknown config key '%s'", key)
                continue
            values[key] = _coerce(key, value, type(getattr(defaults, key)))
        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        if self.column_binding_limit < 0:
            raise ConfigError("column_binding_limit must not be negative")
        if self.log_chunk_size <= 0:
            raise ConfigError("log_chunk_size must be positive")
        if not 1 <= self.picker_height_percent <= 100:
            raise ConfigError("picker_height_percent must be between 1 and 100")
        if not self.kubectl:
            raise ConfigError("kubectl must name a binary")


def _coerce(key: str, value: Any, expected: type) -> Any:
    if expected is bool:
        if isinstance(value, bool):
            return value
        raise ConfigError(f"'{key}' must be true or false")
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be of type {expected.__name__}")
    if expected is float and isinstance(value, (int, float)):
        return float(value)
    if expected is int and isinstance(value, int):
        return value
    if expected is str and isinstance(value, str):
        return value
    raise ConfigError(f"'{key}' must be of type {expected.__name__}")


def resolve_config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return path.expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Optional[Path] = None) -> ViewConfig:
    """Load configuration, falling back to defaults when no file exists."""

    config_path = resolve_config_path(path)
    if not config_path.exists():
        LOGGER.debug("No config at %s; using defaults", config_path)
        return ViewConfig()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must contain a mapping")
    return ViewConfig.from_mapping(data)


__all__ = [
    "ConfigError",
    "ViewConfig",
    "load_config",
    "resolve_config_path",
    "CONFIG_ENV_VAR",
]

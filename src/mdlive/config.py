"""Editor configuration with JSON persistence.

Settings live in ``~/.mdlive/config.json`` with camelCase keys; command
line flags are applied on top by :func:`mdlive.cli.main`.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from mdlive.errors import ConfigError
from mdlive.layout import DEFAULT_BULLET

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".mdlive"
LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class Config:
    """Editor configuration."""

    render_width: int | None = None
    poll_interval_ms: int = 50
    bullet: str = DEFAULT_BULLET
    heading_double_height: bool = True
    log_file: str | None = None
    log_level: str = "warning"
    config_path: str = field(default_factory=lambda: default_config_path())

    @property
    def poll_interval(self) -> float:
        """Poll timeout in seconds."""
        return self.poll_interval_ms / 1000

    def apply_overrides(self, overrides: dict[str, Any]) -> None:
        """Set every non-``None`` value in *overrides* (snake_case keys)."""
        for key, value in overrides.items():
            if value is not None:
                setattr(self, key, value)
        self.validate()

    def validate(self) -> None:
        if self.render_width is not None and self.render_width < 2:
            raise ConfigError(f"renderWidth must be at least 2, got {self.render_width}")
        if self.poll_interval_ms <= 0:
            raise ConfigError(f"pollIntervalMs must be positive, got {self.poll_interval_ms}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"logLevel must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")


# --- Key mapping ---


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "render_width": (int, type(None)),
    "poll_interval_ms": (int,),
    "bullet": (str,),
    "heading_double_height": (bool,),
    "log_file": (str, type(None)),
    "log_level": (str,),
}

_KEY_TO_FIELD: dict[str, str] = {_camel(f.name): f.name for f in fields(Config) if f.name in _FIELD_TYPES}


def config_from_dict(data: dict[str, Any]) -> Config:
    """Build a :class:`Config` from a camelCase settings dict."""
    values: dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_TO_FIELD.get(key)
        if name is None:
            logger.warning("ignoring unknown config key %r", key)
            continue
        expected = _FIELD_TYPES[name]
        # bool is an int subclass
        if not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected):
            raise ConfigError(f"{key} has invalid value {value!r}")
        values[name] = value
    config = Config(**values)
    config.validate()
    return config


# --- Loading ---


def default_config_path() -> str:
    """Default config file (~/.mdlive/config.json)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, "config.json")


def load_config(path: str | None = None) -> Config:
    """Load configuration from *path*, or the default location.

    A missing default file yields the defaults; a missing explicit file is
    an error.
    """
    explicit = path is not None
    path = path or default_config_path()
    if not os.path.exists(path):
        if explicit:
            raise ConfigError(f"config file not found: {path}")
        return Config(config_path=path)

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")

    config = config_from_dict(data)
    config.config_path = path
    logger.debug("loaded config from %s", path)
    return config

"""Configuration: frozen dataclass loaded from defaults <- YAML file <- env vars."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, Mapping

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "STRUCTY_"
CONFIG_PATH_ENV = "STRUCTY_CONFIG"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def _parse_fields(value) -> frozenset[str]:
    """Accept a list of names or a comma-separated string."""
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(name.strip() for name in value.split(",") if name.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(name) for name in value)
    logger.warning("Ignoring highlight fields %r: expected a list or a string", value)
    return frozenset()


@dataclass(frozen=True)
class Config:
    disable_colors: bool = False
    disable_level: bool = False
    parse_depth: int = 1
    timestamp_field: str = ""
    highlight_fields: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if isinstance(self.parse_depth, bool) or not isinstance(self.parse_depth, int):
            raise ValueError(f"parse_depth must be an integer, got {self.parse_depth!r}")
        if self.parse_depth < 1:
            raise ValueError(f"parse_depth must be >= 1, got {self.parse_depth}")
        if not isinstance(self.highlight_fields, frozenset):
            object.__setattr__(self, "highlight_fields", _parse_fields(self.highlight_fields))


def _load_yaml(path: str) -> dict:
    """Read the YAML config file; problems are logged and yield an empty dict."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except OSError as exc:
        logger.warning("Cannot read config file %s, using defaults: %s", path, exc)
        return {}
    except yaml.YAMLError as exc:
        logger.warning("Invalid YAML in %s, using defaults: %s", path, exc)
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config file %s must contain a mapping, using defaults", path)
        return {}
    return data


def _apply(kwargs: dict, source: Mapping, names: Iterable[tuple[str, str]]) -> None:
    """Copy recognised keys from *source* into Config kwargs, converting types."""
    for source_key, attr in names:
        if source_key not in source:
            continue
        raw = source[source_key]
        if attr in ("disable_colors", "disable_level"):
            kwargs[attr] = _parse_bool(raw)
        elif attr == "parse_depth":
            try:
                kwargs[attr] = int(raw)
            except (TypeError, ValueError):
                # left as-is for Config to reject unless a later layer overrides it
                kwargs[attr] = raw
        elif attr == "timestamp_field":
            kwargs[attr] = "" if raw is None else str(raw)
        elif attr == "highlight_fields":
            kwargs[attr] = _parse_fields(raw)


_FILE_KEYS = (
    ("no_colors", "disable_colors"),
    ("no_level", "disable_level"),
    ("parse_depth", "parse_depth"),
    ("timestamp_prop", "timestamp_field"),
    ("highlight_props", "highlight_fields"),
)

_ENV_KEYS = tuple((ENV_PREFIX + key.upper(), attr) for key, attr in _FILE_KEYS)


def load_config_kwargs(config_path: str | None = None, environ: Mapping[str, str] | None = None) -> dict:
    """Collect Config kwargs from the YAML file and env vars (highest priority).

    Nothing is validated here so later layers, such as CLI flags, can still
    override a bad value. The file path falls back to ``STRUCTY_CONFIG``.
    """
    if environ is None:
        environ = os.environ

    kwargs: dict = {}
    path = config_path or environ.get(CONFIG_PATH_ENV)
    if path:
        _apply(kwargs, _load_yaml(path), _FILE_KEYS)
    _apply(kwargs, environ, _ENV_KEYS)
    return kwargs


def load_config(config_path: str | None = None, environ: Mapping[str, str] | None = None) -> Config:
    """Build Config from defaults <- YAML file <- env vars (highest priority)."""
    return Config(**load_config_kwargs(config_path, environ))

"""
Loading of ``.tsoverride.yaml``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import ConfigError
from .model import OverrideConfig

_LOG = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".tsoverride.yaml", "tsoverride.yaml")

_yaml = YAML(typ="safe")


def _read_yaml_map(path: Path) -> dict:
    """Read a YAML file that must hold a mapping (an empty file is an empty mapping)."""
    try:
        raw = _yaml.load(path.read_text(encoding="utf-8")) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML must be a mapping: {path}")
    return raw


def find_config(start: Path) -> Optional[Path]:
    """Nearest config file in ``start`` or one of its parents."""
    start = start.resolve()
    if start.is_file():
        start = start.parent
    for directory in (start, *start.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config(path: Optional[Path] = None, *, start: Optional[Path] = None) -> OverrideConfig:
    """
    Load configuration.

    Args:
        path: Explicit config file; must exist
        start: Directory to search upwards from when no path is given (default: cwd)

    Returns:
        Loaded configuration, or defaults when no file is found
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = find_config(start or Path.cwd())
        if path is None:
            _LOG.debug("No config file found, using defaults")
            return OverrideConfig()

    _LOG.debug("Loading config from %s", path)
    return OverrideConfig.from_dict(_read_yaml_map(path), path=path)

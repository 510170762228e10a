"""
Configuration model for tsoverride.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..errors import ConfigError
from ..types import OverrideStyle, PolicyConfiguration

DEFAULT_EXTENSIONS = [".ts", ".tsx", ".mts", ".cts"]
DEFAULT_MAX_FIX_PASSES = 10

_KNOWN_KEYS = {"style", "extensions", "exclude", "type_info", "max_fix_passes"}


@dataclass
class OverrideConfig:
    style: OverrideStyle = OverrideStyle.EITHER
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    exclude: List[str] = field(default_factory=list)  # gitwildmatch patterns
    type_info: bool = True  # False forces the heritage-clause heuristic
    max_fix_passes: int = DEFAULT_MAX_FIX_PASSES
    path: Optional[Path] = None  # file the values came from

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]], path: Optional[Path] = None) -> OverrideConfig:
        """
        Build configuration from a YAML mapping.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        cfg = OverrideConfig(path=path)
        if not d:
            return cfg

        where = f" in {path}" if path else ""
        unknown = sorted(set(map(str, d)) - _KNOWN_KEYS)
        if unknown:
            raise ConfigError(f"Unknown config key(s){where}: {', '.join(unknown)}")

        if "style" in d:
            cfg.style = OverrideStyle.parse(_expect(d, "style", str, where))
        if "extensions" in d:
            cfg.extensions = [_normalize_ext(e) for e in _expect_str_list(d, "extensions", where)]
        if "exclude" in d:
            cfg.exclude = _expect_str_list(d, "exclude", where)
        if "type_info" in d:
            cfg.type_info = _expect(d, "type_info", bool, where)
        if "max_fix_passes" in d:
            passes = d["max_fix_passes"]
            if isinstance(passes, bool) or not isinstance(passes, int) or passes < 1:
                raise ConfigError(f"'max_fix_passes'{where} must be a positive integer, got {passes!r}")
            cfg.max_fix_passes = passes

        return cfg

    def policy(self) -> PolicyConfiguration:
        return PolicyConfiguration(style=self.style)


def _expect(d: Dict[str, Any], key: str, tp: type, where: str) -> Any:
    val = d[key]
    if not isinstance(val, tp):
        raise ConfigError(f"'{key}'{where} must be {tp.__name__}, got {type(val).__name__}")
    return val


def _expect_str_list(d: Dict[str, Any], key: str, where: str) -> List[str]:
    val = d[key]
    if isinstance(val, str):
        val = [val]
    if not isinstance(val, list) or not all(isinstance(x, str) for x in val):
        raise ConfigError(f"'{key}'{where} must be a list of strings")
    return list(val)


def _normalize_ext(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else "." + ext

from __future__ import annotations

from .load import CONFIG_FILE_NAMES, find_config, load_config
from .model import OverrideConfig

__all__ = ["CONFIG_FILE_NAMES", "OverrideConfig", "find_config", "load_config"]

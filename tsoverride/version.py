from __future__ import annotations

from importlib import metadata


def tool_version() -> str:
    """
    Installed package version.
    Kept free of other package imports to avoid cycles.
    """
    try:
        return metadata.version("tsoverride")
    except metadata.PackageNotFoundError:
        return "0.0.0"

__all__ = ["tool_version"]

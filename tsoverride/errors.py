"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from TSOverrideUserError.

Programming errors and bugs should NOT inherit from TSOverrideUserError,
they propagate with full tracebacks.
"""

from __future__ import annotations


class TSOverrideUserError(Exception):
    """
    Base class for all user-facing errors in tsoverride.

    These errors indicate problems that the user can fix:
    configuration issues, unknown styles, unreadable files, etc.
    """
    pass


class ConfigError(TSOverrideUserError):
    """Invalid configuration file or option value."""
    pass


class SourceReadError(TSOverrideUserError):
    """A source file could not be read or written."""
    pass


__all__ = ["TSOverrideUserError", "ConfigError", "SourceReadError"]

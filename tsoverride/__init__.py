"""
tsoverride: keeps override declarations on TypeScript class members consistent.

A member that overrides a base class member or implements an interface member
must carry an override declaration (the JSDoc ``@override`` tag, the
``override`` keyword, or both, depending on the configured style); a member
that overrides nothing must not.
"""

from __future__ import annotations

from .types import (
    Diagnostic,
    Fix,
    MessageKind,
    OverrideSource,
    OverrideStyle,
    PolicyConfiguration,
    SourceKind,
    TextEdit,
)

__all__ = [
    "Diagnostic",
    "Fix",
    "MessageKind",
    "OverrideSource",
    "OverrideStyle",
    "PolicyConfiguration",
    "SourceKind",
    "TextEdit",
]

"""
Host driver: builds the engine's model from TypeScript sources with tree-sitter.
"""

from __future__ import annotations

from .hierarchy import DeclaredType, DeclaredTypeHierarchy
from .typescript import TypeScriptDocument

__all__ = ["DeclaredType", "DeclaredTypeHierarchy", "TypeScriptDocument"]

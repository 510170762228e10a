"""
Parser-independent override engine.
"""

from __future__ import annotations

from .classifier import display_name, member_kind_label, should_skip
from .detector import detect, has_keyword_declaration, has_tag_declaration, is_declaration_only_comment
from .engine import OverrideChecker
from .fixer import build_fix
from .policy import FixAction, Verdict, decide
from .positions import FixPositionCalculator
from .resolver import OverrideSourceResolver, heuristic_source

__all__ = [
    "OverrideChecker",
    "OverrideSourceResolver",
    "FixPositionCalculator",
    "FixAction",
    "Verdict",
    "build_fix",
    "decide",
    "detect",
    "display_name",
    "has_keyword_declaration",
    "has_tag_declaration",
    "heuristic_source",
    "is_declaration_only_comment",
    "member_kind_label",
    "should_skip",
]

"""
Value types shared by the override engine and its hosts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple

from .errors import ConfigError

if TYPE_CHECKING:
    from .range_edits import RangeEditor


class SourceKind(Enum):
    """Nature of the type a member overrides or implements."""
    INTERFACE = "interface"
    CLASS = "class"


@dataclass(frozen=True)
class OverrideSource:
    """What a member overrides. ``None`` in its place means the member is the type's own."""
    kind: SourceKind
    name: str


@dataclass(frozen=True)
class DeclarationState:
    has_tag: bool
    has_keyword: bool


class OverrideStyle(Enum):
    """Which declaration forms are required for class-sourced overrides."""
    TAG_ONLY = "tag-only"
    KEYWORD_ONLY = "keyword-only"
    BOTH = "both"
    EITHER = "either"

    @classmethod
    def parse(cls, value: str) -> OverrideStyle:
        """
        Parse a style name, accepting the legacy aliases ``jsdoc`` and ``keyword``.

        Raises:
            ConfigError: If the value names no known style
        """
        if isinstance(value, OverrideStyle):
            return value
        key = str(value).strip().lower()
        key = _STYLE_ALIASES.get(key, key)
        for style in cls:
            if style.value == key:
                return style
        allowed = ", ".join([s.value for s in cls] + sorted(_STYLE_ALIASES))
        raise ConfigError(f"Unknown override style {value!r} (expected one of: {allowed})")


_STYLE_ALIASES = {
    "jsdoc": "tag-only",
    "keyword": "keyword-only",
}


@dataclass(frozen=True)
class PolicyConfiguration:
    style: OverrideStyle = OverrideStyle.EITHER


class MessageKind(Enum):
    MISSING_TAG = "missing-tag"
    MISSING_KEYWORD = "missing-keyword"
    MISSING_BOTH = "missing-both"
    MISSING_EITHER = "missing-either"
    UNNECESSARY_TAG = "unnecessary-tag"
    UNNECESSARY_KEYWORD = "unnecessary-keyword"


@dataclass(frozen=True)
class TextEdit:
    """Replace text[start:end] with ``text``. A zero-width range is an insertion."""
    start: int
    end: int
    text: str = ""

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Fix:
    """
    Self-consistent group of edits for one diagnostic.

    Edits are sorted by position and never overlap each other.
    """
    edits: Tuple[TextEdit, ...]

    def apply_to(self, editor: RangeEditor, edit_type: Optional[str] = None) -> bool:
        """Hand the edits to a host editor. Returns False if the editor rejected the fix."""
        return editor.add_fix(self, edit_type)

    def apply(self, text: str) -> str:
        """Apply this fix alone to ``text``."""
        from .range_edits import RangeEditor

        editor = RangeEditor(text)
        self.apply_to(editor)
        result, _ = editor.apply_edits()
        return result


_MESSAGES = {
    MessageKind.MISSING_TAG: '{label} "{name}" must have @override comment (from {source_kind} {source_name}).',
    MessageKind.MISSING_KEYWORD: '{label} "{name}" must have override keyword (from {source_kind} {source_name}).',
    MessageKind.MISSING_BOTH: (
        '{label} "{name}" must have both @override comment and override keyword '
        '(from {source_kind} {source_name}).'
    ),
    MessageKind.MISSING_EITHER: (
        '{label} "{name}" must have @override comment or override keyword '
        '(from {source_kind} {source_name}).'
    ),
    MessageKind.UNNECESSARY_TAG: '{label} "{name}" does not need @override.',
    MessageKind.UNNECESSARY_KEYWORD: '{label} "{name}" does not need override keyword.',
}


@dataclass(frozen=True)
class Diagnostic:
    """
    One finding for one member.

    ``start``/``end`` are the member's character range, ``fix`` is None when
    no safe edit could be computed.
    """
    message_kind: MessageKind
    member_name: str
    member_kind_label: str
    source_kind: Optional[SourceKind] = None
    source_name: Optional[str] = None
    fix: Optional[Fix] = None
    start: int = 0
    end: int = 0

    @property
    def message(self) -> str:
        return _MESSAGES[self.message_kind].format(
            label=self.member_kind_label,
            name=self.member_name,
            source_kind=self.source_kind.value if self.source_kind else "",
            source_name=self.source_name or "",
        )

    @property
    def fixable(self) -> bool:
        return self.fix is not None


__all__ = [
    "SourceKind",
    "OverrideSource",
    "DeclarationState",
    "OverrideStyle",
    "PolicyConfiguration",
    "MessageKind",
    "TextEdit",
    "Fix",
    "Diagnostic",
]

"""
Range-based text editing for applying override fixes.
Fixes are accepted whole or not at all, then applied from the end of the text backwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from .types import Fix

_LOG = logging.getLogger(__name__)


@dataclass
class TextRange:
    """Represents a range in text by character positions."""
    start_char: int
    end_char: int

    def __post_init__(self):
        if self.start_char > self.end_char:
            raise ValueError(f"Invalid range: start_char ({self.start_char}) > end_char ({self.end_char})")

    @property
    def length(self) -> int:
        return self.end_char - self.start_char

    def overlaps(self, other: TextRange) -> bool:
        """Check if this range overlaps with another."""
        return not (self.end_char <= other.start_char or other.end_char <= self.start_char)


@dataclass
class Edit:
    """Represents a single text edit operation using character positions."""
    range: TextRange
    replacement: str
    type: Optional[str]  # message kind, for the summary
    is_insertion: bool = False


def _conflict(a: Edit, b: Edit) -> bool:
    if a.is_insertion and b.is_insertion:
        # Two insertions at one position have no defined order
        return a.range.start_char == b.range.start_char
    if a.is_insertion:
        return b.range.start_char < a.range.start_char < b.range.end_char
    if b.is_insertion:
        return a.range.start_char < b.range.start_char < a.range.end_char
    return a.range.overlaps(b.range)


class RangeEditor:
    """
    Unicode-safe range-based text editor that works with character positions.

    Edits from different fixes must not touch each other; a fix that conflicts
    with an already accepted edit is rejected as a whole so the host can retry
    it on the next pass.
    """

    def __init__(self, original_text: str):
        self.original_text = original_text
        self.edits: List[Edit] = []
        self.fixes_applied = 0

    def _accepts(self, edit: Edit) -> bool:
        return not any(_conflict(edit, existing) for existing in self.edits)

    def add_fix(self, fix: Fix, edit_type: Optional[str] = None) -> bool:
        """
        Add all edits of a fix, or none of them.

        Args:
            fix: Fix to add
            edit_type: Label recorded with each edit

        Returns:
            True if the fix was accepted
        """
        staged: List[Edit] = []
        for te in fix.edits:
            char_range = TextRange(te.start, te.end)
            edit = Edit(char_range, te.text, edit_type, is_insertion=char_range.length == 0)
            if not self._accepts(edit) or any(_conflict(edit, other) for other in staged):
                _LOG.debug("Fix rejected: edit %d..%d conflicts with a pending edit", te.start, te.end)
                return False
            staged.append(edit)
        self.edits.extend(staged)
        self.fixes_applied += 1
        return True

    def validate_edits(self) -> List[str]:
        """Validate that all edits are within bounds."""
        errors = []
        for i, edit in enumerate(self.edits):
            if edit.range.start_char < 0:
                errors.append(f"Edit {i}: start_char ({edit.range.start_char}) is negative")
            if edit.range.end_char > len(self.original_text):
                errors.append(f"Edit {i}: end_char ({edit.range.end_char}) exceeds text length ({len(self.original_text)})")
        return errors

    def apply_edits(self) -> Tuple[str, Dict[str, Any]]:
        """
        Apply all edits and return the modified text and statistics.

        Returns:
            Tuple of (modified_text, statistics)
        """
        validation_errors = self.validate_edits()
        if validation_errors:
            raise ValueError(f"Edit validation failed: {'; '.join(validation_errors)}")

        stats = {
            "edits_applied": len(self.edits),
            "fixes_applied": self.fixes_applied,
            "chars_removed": 0,
            "chars_added": 0,
        }
        if not self.edits:
            return self.original_text, stats

        # Back to front; on equal starts the replacement goes before the insertion
        sorted_edits = sorted(
            self.edits,
            key=lambda e: (e.range.start_char, not e.is_insertion),
            reverse=True,
        )

        result_text = self.original_text
        for edit in sorted_edits:
            start, end = edit.range.start_char, edit.range.end_char
            stats["chars_removed"] += end - start
            stats["chars_added"] += len(edit.replacement)
            result_text = result_text[:start] + edit.replacement + result_text[end:]

        return result_text, stats

    def get_edit_summary(self) -> Dict[str, Any]:
        """Get summary of planned edits without applying them."""
        edit_types: Dict[str, int] = {}
        for edit in self.edits:
            if edit.type:
                edit_types[edit.type] = edit_types.get(edit.type, 0) + 1
        return {
            "total_edits": len(self.edits),
            "total_fixes": self.fixes_applied,
            "edit_types": edit_types,
        }

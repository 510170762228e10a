"""
Fixer: composes calculator edits into a single self-consistent fix.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..types import Fix, TextEdit

_LOG = logging.getLogger(__name__)


def build_fix(edits: Sequence[Optional[TextEdit]]) -> Optional[Fix]:
    """
    Build a fix from edits, or None if any edit is missing or two of them collide.

    Insertions at one offset are merged into a single edit, keeping the
    order in which they were given.
    """
    if not edits or any(e is None for e in edits):
        return None

    # Stable sort keeps the caller's order for insertions at one offset
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    merged: List[TextEdit] = []
    for edit in ordered:
        if merged:
            prev = merged[-1]
            if edit.is_insertion and prev.is_insertion and prev.start == edit.start:
                merged[-1] = TextEdit(prev.start, prev.end, prev.text + edit.text)
                continue
            if edit.start < prev.end:
                _LOG.debug("Dropping fix: edits %d..%d and %d..%d overlap", prev.start, prev.end, edit.start, edit.end)
                return None
        merged.append(edit)

    return Fix(tuple(merged))

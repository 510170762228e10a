"""
Policy engine: compares the required declaration forms with the present ones.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..types import DeclarationState, MessageKind, OverrideSource, OverrideStyle, PolicyConfiguration, SourceKind


class FixAction(Enum):
    ADD_TAG = "add-tag"
    ADD_KEYWORD = "add-keyword"
    ADD_BOTH = "add-both"
    REMOVE_TAG = "remove-tag"
    REMOVE_KEYWORD = "remove-keyword"


@dataclass(frozen=True)
class Verdict:
    """One diagnostic to emit, with the edit that would resolve it."""
    message_kind: MessageKind
    action: FixAction


_MISSING_TAG = Verdict(MessageKind.MISSING_TAG, FixAction.ADD_TAG)
_MISSING_KEYWORD = Verdict(MessageKind.MISSING_KEYWORD, FixAction.ADD_KEYWORD)
_MISSING_BOTH = Verdict(MessageKind.MISSING_BOTH, FixAction.ADD_BOTH)
_MISSING_EITHER = Verdict(MessageKind.MISSING_EITHER, FixAction.ADD_TAG)
_UNNECESSARY_TAG = Verdict(MessageKind.UNNECESSARY_TAG, FixAction.REMOVE_TAG)
_UNNECESSARY_KEYWORD = Verdict(MessageKind.UNNECESSARY_KEYWORD, FixAction.REMOVE_KEYWORD)


def decide(
    source: Optional[OverrideSource],
    state: DeclarationState,
    policy: PolicyConfiguration,
) -> List[Verdict]:
    """
    Args:
        source: What the member overrides, None for the class's own members
        state: Declarations present on the member
        policy: Configured style, applies to class-sourced members only

    Returns:
        Verdicts in reporting order (tag before keyword)
    """
    verdicts: List[Verdict] = []

    if source is None:
        if state.has_tag:
            verdicts.append(_UNNECESSARY_TAG)
        if state.has_keyword:
            verdicts.append(_UNNECESSARY_KEYWORD)
        return verdicts

    if source.kind is SourceKind.INTERFACE:
        # Implementing an interface needs the tag whatever the style; a keyword is tolerated
        if not state.has_tag:
            verdicts.append(_MISSING_TAG)
        return verdicts

    style = policy.style
    if style is OverrideStyle.TAG_ONLY:
        if not state.has_tag:
            verdicts.append(_MISSING_TAG)
        if state.has_keyword:
            verdicts.append(_UNNECESSARY_KEYWORD)
    elif style is OverrideStyle.KEYWORD_ONLY:
        if state.has_tag:
            verdicts.append(_UNNECESSARY_TAG)
        if not state.has_keyword:
            verdicts.append(_MISSING_KEYWORD)
    elif style is OverrideStyle.BOTH:
        if not state.has_tag and not state.has_keyword:
            verdicts.append(_MISSING_BOTH)
        elif not state.has_tag:
            verdicts.append(_MISSING_TAG)
        elif not state.has_keyword:
            verdicts.append(_MISSING_KEYWORD)
    else:
        if not state.has_tag and not state.has_keyword:
            verdicts.append(_MISSING_EITHER)

    return verdicts

"""
Detection of existing override declarations on a member.

The tag form lives in the comments right before the member. A comment line
declares the tag only when, once the block decoration (leading whitespace and
one ``*``) is stripped, it starts with ``@override``, and the tag is not inside
an inline code span or a fenced code example.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..model import Comment, MemberDeclaration
from ..types import DeclarationState

_DECORATION = re.compile(r"^\s*\*\s?")
_OVERRIDE_TAG = re.compile(r"^@override\b", re.IGNORECASE)
_ANY_TAG = re.compile(r"^@\w+")
_FENCE = "```"


def clean_line(line: str) -> str:
    """Strip the block-comment decoration and surrounding whitespace."""
    return _DECORATION.sub("", line, count=1).strip()


def comment_lines(comment: Comment) -> List[str]:
    return comment.value.split("\n")


def _outside_code_span(line: str) -> bool:
    at = line.find("@")
    return line[:at].count("`") % 2 == 0


def _tag_line_indexes(comment: Comment, pattern: re.Pattern) -> List[int]:
    found: List[int] = []
    in_fence = False
    for i, line in enumerate(comment_lines(comment)):
        cleaned = clean_line(line)
        if cleaned.startswith(_FENCE):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if pattern.match(cleaned) and _outside_code_span(line):
            found.append(i)
    return found


def override_tag_lines(comment: Comment) -> List[int]:
    """Indexes of the lines of ``comment.value`` that carry a real ``@override`` tag."""
    return _tag_line_indexes(comment, _OVERRIDE_TAG)


def first_tag_line(comment: Comment) -> Optional[int]:
    """Index of the first line starting with any tag (``@param``, ``@override``...)."""
    found = _tag_line_indexes(comment, _ANY_TAG)
    return found[0] if found else None


def comment_has_tag(comment: Comment) -> bool:
    return bool(override_tag_lines(comment))


def is_declaration_only_comment(comment: Comment) -> bool:
    """
    True if the tag is the comment's only content: every non-blank
    line is a tag line (no description, no other tags).
    """
    tag_lines = set(override_tag_lines(comment))
    if not tag_lines:
        return False
    for i, line in enumerate(comment_lines(comment)):
        if i not in tag_lines and clean_line(line):
            return False
    return True


def find_tag_comment(member: MemberDeclaration) -> Optional[Comment]:
    """First leading comment that declares the tag."""
    for comment in member.leading_comments:
        if comment_has_tag(comment):
            return comment
    return None


def has_tag_declaration(member: MemberDeclaration) -> bool:
    return find_tag_comment(member) is not None


def has_keyword_declaration(member: MemberDeclaration) -> bool:
    return member.has_override_keyword


def detect(member: MemberDeclaration) -> DeclarationState:
    return DeclarationState(
        has_tag=has_tag_declaration(member),
        has_keyword=has_keyword_declaration(member),
    )

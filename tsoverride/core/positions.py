"""
Fix position calculator.

Computes the exact edits that add or remove an override declaration while
keeping the surrounding indentation, comment decoration and line endings.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..model import Comment, MemberDeclaration, MemberKind
from ..types import TextEdit
from .detector import comment_lines, first_tag_line, find_tag_comment, is_declaration_only_comment, override_tag_lines, clean_line

TAG = "@override"
KEYWORD = "override"

_INDENT = re.compile(r"[ \t]*")
_TAG_LINE_PREFIX = re.compile(r"[ \t]*\*?[ \t]*")
_STAR_PREFIX = re.compile(r"[ \t]*\*[ \t]?")


class FixPositionCalculator:
    """
    Edit positions for one source text.

    Every method returns None (or an empty list) when the member does not
    have the shape it expects; callers then report the diagnostic without a fix.
    """

    def __init__(self, text: str):
        self.text = text
        self.newline = "\r\n" if "\r\n" in text else "\n"

    # ---------- helpers ----------

    def line_start(self, offset: int) -> int:
        return self.text.rfind("\n", 0, offset) + 1

    def indentation(self, offset: int) -> str:
        """Leading whitespace of the line containing ``offset``."""
        start = self.line_start(offset)
        return _INDENT.match(self.text, start).group(0)

    def _is_doc_block(self, comment: Comment) -> bool:
        return (
            comment.is_doc
            and self.text.startswith("/**", comment.start)
            and self.text.startswith("*/", comment.end - 2)
        )

    def _doc_comment(self, member: MemberDeclaration) -> Optional[Comment]:
        # The doc block closest to the member
        for comment in reversed(member.leading_comments):
            if self._is_doc_block(comment):
                return comment
        return None

    @staticmethod
    def _line_offset(comment: Comment, lines: List[str], index: int) -> int:
        return comment.start + 2 + sum(len(line) + 1 for line in lines[:index])

    # ---------- tag ----------

    def tag_insertion(self, member: MemberDeclaration) -> Optional[TextEdit]:
        """
        Edit adding the ``@override`` tag.

        - doc block with tags: a peer tag line before the first tag;
        - doc block with description only: a tag line before the closing delimiter;
        - no doc block: a new minimal block right before the member, on a
          line of its own.
        """
        nl = self.newline
        indent = self.indentation(member.start)
        comment = self._doc_comment(member)

        if comment is None:
            line_start = self.line_start(member.start)
            if not self.text[line_start:member.start].strip():
                text = f"/**{nl}{indent} * {TAG}{nl}{indent} */{nl}{indent}"
                return TextEdit(member.start, member.start, text)
            # Member shares its line with other code: the block and the member move to a new line
            start = member.start
            while start > line_start and self.text[start - 1] in " \t":
                start -= 1
            before = self.text[line_start:start]
            inner = indent
            if before.count("{") > before.count("}"):
                # The class body opens on this line
                inner += "\t" if indent.startswith("\t") else "  "
            text = f"{nl}{inner}/**{nl}{inner} * {TAG}{nl}{inner} */{nl}{inner}"
            return TextEdit(start, member.start, text)

        lines = comment_lines(comment)
        tag_index = first_tag_line(comment)

        if tag_index is not None and tag_index > 0:
            offset = self._line_offset(comment, lines, tag_index)
            prefix = _TAG_LINE_PREFIX.match(lines[tag_index]).group(0)
            return TextEdit(offset, offset, f"{prefix}{TAG}{nl}")

        if tag_index == 0:
            start = comment.start + 3
            close = comment.end - 2
            if len(lines) == 1:
                # /** @param x */ becomes a multi-line block
                body = self.text[start:close].strip()
                return TextEdit(start, close, f"{nl}{indent} * {TAG}{nl}{indent} * {body}{nl}{indent} ")
            # Tags start on the opening line: /** @param x ...
            end = start
            while end < close and self.text[end] in " \t":
                end += 1
            return TextEdit(start, end, f"{nl}{indent} * {TAG}{nl}{indent} * ")

        if len(lines) > 1 and not lines[-1].strip():
            # Closing delimiter on its own line
            offset = comment.end - 2 - len(lines[-1])
            prefix = self._star_prefix(lines[1:-1], indent)
            return TextEdit(offset, offset, f"{prefix}{TAG}{nl}")

        # Closing delimiter shares a line with the description
        close = comment.end - 2
        start = close
        while start > comment.start + 3 and self.text[start - 1] in " \t":
            start -= 1
        return TextEdit(start, close, f"{nl}{indent} * {TAG}{nl}{indent} ")

    @staticmethod
    def _star_prefix(content_lines: List[str], indent: str) -> str:
        for line in reversed(content_lines):
            if not clean_line(line):
                continue
            m = _STAR_PREFIX.match(line)
            if m:
                prefix = m.group(0)
                return prefix if prefix[-1] in " \t" else prefix + " "
            return _INDENT.match(line).group(0)
        return f"{indent} * "

    def tag_removal(self, member: MemberDeclaration) -> List[TextEdit]:
        """
        Edits removing the tag: the whole comment if the tag is all it holds,
        otherwise only the tag line.
        """
        comment = find_tag_comment(member)
        if comment is None:
            return []
        if is_declaration_only_comment(comment):
            return [self._whole_comment_removal(comment)]
        if not comment.is_block:
            return []

        lines = comment_lines(comment)
        index = override_tag_lines(comment)[0]
        line = lines[index]
        content = line[:-1] if line.endswith("\r") else line
        line_start = self._line_offset(comment, lines, index)

        if index == 0:
            # Tag right after the opening delimiter: keep "/**"
            start = comment.start + 3 if comment.value.startswith("*") else comment.start + 2
            return [TextEdit(start, line_start + len(content))]

        if index == len(lines) - 1:
            # Tag shares its line with the closing delimiter
            start = line_start - 1
            if self.text[start - 1:start] == "\r":
                start -= 1
            lead = _INDENT.match(content).group(0)
            return [TextEdit(start, line_start + len(content), f"{self.newline}{lead}")]

        return [TextEdit(line_start, line_start + len(line) + 1)]

    def _whole_comment_removal(self, comment: Comment) -> TextEdit:
        text = self.text
        end = comment.end
        while end < len(text) and text[end] in " \t":
            end += 1

        newline_len = 0
        if text.startswith("\r\n", end):
            newline_len = 2
        elif text.startswith("\n", end):
            newline_len = 1

        line_start = self.line_start(comment.start)
        if newline_len and not text[line_start:comment.start].strip():
            return TextEdit(line_start, end + newline_len)
        return TextEdit(comment.start, end)

    # ---------- keyword ----------

    def keyword_insert_position(self, member: MemberDeclaration) -> Optional[int]:
        """
        Offset where ``override `` goes: before ``abstract``, else ``async``,
        else ``get``/``set``, else ``*``, else the computed name's ``[``,
        else the name.
        """
        tok = member.find_token("abstract")
        if tok is not None:
            return tok.start

        if member.is_async:
            tok = member.find_token("async")
            if tok is not None:
                return tok.start

        if member.kind in (MemberKind.GETTER, MemberKind.SETTER):
            tok = member.find_token("get" if member.kind is MemberKind.GETTER else "set")
            if tok is not None:
                return tok.start

        tok = member.find_token("*")
        if tok is not None:
            return tok.start

        if member.name.is_computed:
            for tok in member.tokens:
                if tok.value == "[" and tok.start <= member.name.start:
                    return tok.start

        if member.start <= member.name.start <= member.end and member.name.start <= len(self.text):
            return member.name.start
        return None

    def keyword_insertion(self, member: MemberDeclaration) -> Optional[TextEdit]:
        offset = self.keyword_insert_position(member)
        if offset is None:
            return None
        return TextEdit(offset, offset, f"{KEYWORD} ")

    def keyword_removal(self, member: MemberDeclaration) -> List[TextEdit]:
        """The keyword token plus the whitespace separating it from the next token."""
        tok = member.find_token(KEYWORD)
        if tok is None:
            return []
        end = tok.end
        while end < len(self.text) and self.text[end] in " \t\r\n":
            end += 1
        return [TextEdit(tok.start, end)]

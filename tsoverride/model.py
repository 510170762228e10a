"""
Parser-independent model of what a host supplies to the override engine.

The host (see ``tsoverride.host``) builds these snapshots from a syntax tree;
the engine only reads them. All offsets are character offsets into the file text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Protocol, Tuple

from .types import SourceKind


class MemberKind(Enum):
    METHOD = "method"
    GETTER = "getter"
    SETTER = "setter"
    CONSTRUCTOR = "constructor"


class CommentKind(Enum):
    BLOCK = "block"  # /* ... */ and /** ... */
    LINE = "line"    # // ...


@dataclass(frozen=True)
class Token:
    value: str
    start: int
    end: int


@dataclass(frozen=True)
class Comment:
    """
    A comment preceding a member.

    ``value`` is the text between the delimiters: for ``/** x */`` it is ``* x ``,
    for ``// x`` it is `` x``. ``start``/``end`` cover the delimiters.
    """
    kind: CommentKind
    value: str
    start: int
    end: int

    @property
    def is_block(self) -> bool:
        return self.kind is CommentKind.BLOCK

    @property
    def is_doc(self) -> bool:
        """True for ``/** ... */`` blocks."""
        return self.is_block and self.value.startswith("*") and self.end - self.start > 4


@dataclass(frozen=True)
class MemberName:
    """
    Member name. ``text`` is None for computed names (``[expr]``).
    String-literal names carry their unquoted value.
    """
    text: Optional[str]
    start: int
    end: int
    is_private: bool = False   # #name
    is_computed: bool = False


@dataclass(frozen=True)
class MemberDeclaration:
    """
    One method, accessor or abstract-method slot of a class.

    ``start`` is where the declaration begins (its first decorator, if any),
    ``tokens`` are the header tokens from the first modifier through the name,
    ``leading_comments`` are the comments right before it, in source order.
    """
    kind: MemberKind
    name: MemberName
    start: int
    end: int
    tokens: Tuple[Token, ...] = ()
    leading_comments: Tuple[Comment, ...] = ()
    accessibility: Optional[str] = None  # "public" | "protected" | "private"
    is_static: bool = False
    is_abstract: bool = False
    is_async: bool = False
    has_override_keyword: bool = False
    has_body: bool = True
    body_start: Optional[int] = None

    def find_token(self, value: str) -> Optional[Token]:
        """Header token ``value`` placed before the name (a modifier)."""
        for tok in self.tokens:
            if tok.value == value and tok.start < self.name.start:
                return tok
        return None


@dataclass(frozen=True)
class TypeReference:
    """
    Reference to a supertype as written in a heritage clause.

    ``name`` is the referenced type name (``Base``, ``ns.Base``), or None when
    the reference is not a plain name (``Mixin(Base)``).
    """
    name: Optional[str]
    text: str

    @property
    def simple_name(self) -> Optional[str]:
        if not self.name:
            return None
        return self.name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class ClassLikeDeclaration:
    name: Optional[str]
    superclass: Optional[TypeReference] = None
    implements: Tuple[TypeReference, ...] = ()
    members: Tuple[MemberDeclaration, ...] = ()
    start: int = 0
    end: int = 0

    @property
    def has_heritage(self) -> bool:
        return self.superclass is not None or bool(self.implements)


@dataclass(frozen=True)
class MemberTable:
    """
    Names declared directly on one type.

    ``complete`` is False for a type the host knows is referenced but could
    not see (an external or unnamed base); its member list is then empty.
    """
    name: Optional[str]
    kind: SourceKind
    members: FrozenSet[str] = field(default_factory=frozenset)
    complete: bool = True

    def has_member(self, name: str) -> bool:
        return name in self.members


class TypeHierarchy(Protocol):
    """Static type information the host can answer questions about."""

    def lookup(self, ref: TypeReference) -> Optional[MemberTable]:
        """Member table of the referenced type, or None if the type is unknown."""
        ...

    def base_types(self, decl: ClassLikeDeclaration) -> Iterable[MemberTable]:
        """Every base type reachable from the declaration, nearest first."""
        ...


__all__ = [
    "MemberKind",
    "CommentKind",
    "Token",
    "Comment",
    "MemberName",
    "MemberDeclaration",
    "TypeReference",
    "ClassLikeDeclaration",
    "MemberTable",
    "TypeHierarchy",
]

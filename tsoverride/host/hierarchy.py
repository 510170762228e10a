"""
Declared type hierarchy: static type information gathered from the
class, interface and object type declarations of the analysed files.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Protocol, Set, Tuple

from ..model import ClassLikeDeclaration, MemberTable, TypeReference
from ..types import SourceKind

_LOG = logging.getLogger(__name__)


@dataclass
class DeclaredType:
    """A named type and the supertypes it names, as written in one declaration."""
    name: str
    kind: SourceKind
    members: Set[str] = field(default_factory=set)
    bases: List[Tuple[TypeReference, SourceKind]] = field(default_factory=list)

    def table(self) -> MemberTable:
        return MemberTable(self.name, self.kind, frozenset(self.members))


class _DeclarationSource(Protocol):
    def declared_types(self) -> List[DeclaredType]: ...


class DeclaredTypeHierarchy:
    """
    Type hierarchy over every declaration added to it.

    Types are keyed by their simple name; repeated declarations of one name
    (interface merging, class + interface merging) are merged.
    """

    def __init__(self) -> None:
        self._types: Dict[str, DeclaredType] = {}

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, name: str) -> bool:
        return name in self._types

    @classmethod
    def from_documents(cls, documents: Iterable[_DeclarationSource]) -> DeclaredTypeHierarchy:
        hierarchy = cls()
        for doc in documents:
            hierarchy.add_document(doc)
        return hierarchy

    def add_document(self, doc: _DeclarationSource) -> None:
        for declared in doc.declared_types():
            self.add(declared)

    def add(self, declared: DeclaredType) -> None:
        existing = self._types.get(declared.name)
        if existing is None:
            self._types[declared.name] = DeclaredType(
                declared.name, declared.kind, set(declared.members), list(declared.bases)
            )
            return
        _LOG.debug("Merging declarations of %s", declared.name)
        existing.members |= declared.members
        existing.bases.extend(b for b in declared.bases if b not in existing.bases)
        if declared.kind is SourceKind.CLASS:
            existing.kind = SourceKind.CLASS

    def lookup(self, ref: TypeReference) -> Optional[MemberTable]:
        key = ref.simple_name
        if key is None:
            return None
        declared = self._types.get(key)
        return declared.table() if declared is not None else None

    def base_types(self, decl: ClassLikeDeclaration) -> Iterator[MemberTable]:
        """
        Breadth-first walk over superclasses, implemented interfaces and
        interface extensions. Each type is visited once, so cycles end the walk.
        Supertypes that are not declared anywhere come out as incomplete tables.
        """
        queue: Deque[Tuple[TypeReference, SourceKind]] = deque()
        if decl.superclass is not None:
            queue.append((decl.superclass, SourceKind.CLASS))
        queue.extend((ref, SourceKind.INTERFACE) for ref in decl.implements)

        seen: Set[str] = set()
        if decl.name:
            seen.add(decl.name)

        while queue:
            ref, kind = queue.popleft()
            key = ref.simple_name or ref.text
            if key in seen:
                continue
            seen.add(key)

            declared = self._types.get(key) if ref.simple_name else None
            if declared is None:
                yield MemberTable(ref.name, kind, complete=False)
                continue

            yield declared.table()
            queue.extend(declared.bases)

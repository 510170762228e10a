"""
Override source resolution.

Finds what a member overrides or implements by looking its name up in the
member tables of the enclosing class's supertypes:

1. computed names are never resolved;
2. implemented interfaces, in declaration order;
3. the declared superclass;
4. every base type reachable from the class (multi-level chains);
5. otherwise the member is the class's own.

Lookup failures count as "no match" for that candidate. Without a type
hierarchy the resolver falls back to a coarse heuristic based on the heritage
clauses alone; the same heuristic is applied to supertypes the hierarchy
knows about but cannot see into.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..model import ClassLikeDeclaration, MemberDeclaration, MemberTable, TypeHierarchy, TypeReference
from ..types import OverrideSource, SourceKind

_LOG = logging.getLogger(__name__)

INTERFACE_FALLBACK_NAME = "<interface>"
CLASS_FALLBACK_NAME = "<class>"
BASE_FALLBACK_NAME = "<base>"
HEURISTIC_FALLBACK_NAME = "unknown"


def heuristic_source(decl: ClassLikeDeclaration) -> Optional[OverrideSource]:
    """
    Best guess without type information: the first implemented interface,
    else the superclass.
    """
    if decl.implements:
        return OverrideSource(SourceKind.INTERFACE, decl.implements[0].name or HEURISTIC_FALLBACK_NAME)
    if decl.superclass is not None:
        return OverrideSource(SourceKind.CLASS, decl.superclass.name or HEURISTIC_FALLBACK_NAME)
    return None


class OverrideSourceResolver:
    """
    Stateless resolver; ``resolve`` is a pure function of the member name
    and the class's static type information.
    """

    def __init__(self, hierarchy: Optional[TypeHierarchy]):
        self.hierarchy = hierarchy

    def resolve(self, member: MemberDeclaration, decl: ClassLikeDeclaration) -> Optional[OverrideSource]:
        name = member.name.text
        if member.name.is_computed or name is None:
            return None
        if not decl.has_heritage:
            return None

        if self.hierarchy is None:
            return heuristic_source(decl)

        unseen: List[Tuple[SourceKind, Optional[str]]] = []

        for ref in decl.implements:
            table, unknown = self._lookup(ref)
            if unknown:
                unseen.append((SourceKind.INTERFACE, ref.name))
            elif table is not None and self._has_member(table, name):
                return OverrideSource(SourceKind.INTERFACE, ref.name or INTERFACE_FALLBACK_NAME)

        if decl.superclass is not None:
            table, unknown = self._lookup(decl.superclass)
            if unknown:
                unseen.append((SourceKind.CLASS, decl.superclass.name))
            elif table is not None and self._has_member(table, name):
                return OverrideSource(SourceKind.CLASS, decl.superclass.name or CLASS_FALLBACK_NAME)

        found = self._search_base_types(decl, name, unseen)
        if found is not None:
            return found

        return self._guess(unseen)

    def _lookup(self, ref: TypeReference) -> Tuple[Optional[MemberTable], bool]:
        """Returns (table, unknown). A failing lookup is neither a table nor unknown."""
        try:
            table = self.hierarchy.lookup(ref)
        except Exception as e:
            _LOG.debug("Type lookup failed for %r: %s", ref.text, e)
            return None, False
        if table is None or not table.complete:
            return None, True
        return table, False

    @staticmethod
    def _has_member(table: MemberTable, name: str) -> bool:
        try:
            return table.has_member(name)
        except Exception as e:
            _LOG.debug("Member table of %r is unusable: %s", table.name, e)
            return False

    def _search_base_types(
        self,
        decl: ClassLikeDeclaration,
        name: str,
        unseen: List[Tuple[SourceKind, Optional[str]]],
    ) -> Optional[OverrideSource]:
        try:
            for table in self.hierarchy.base_types(decl):
                if not table.complete:
                    unseen.append((table.kind, table.name))
                    continue
                if self._has_member(table, name):
                    return OverrideSource(table.kind, table.name or BASE_FALLBACK_NAME)
        except Exception as e:
            _LOG.debug("Base type walk failed for class %r: %s", decl.name, e)
        return None

    @staticmethod
    def _guess(unseen: List[Tuple[SourceKind, Optional[str]]]) -> Optional[OverrideSource]:
        if not unseen:
            return None
        for kind in (SourceKind.INTERFACE, SourceKind.CLASS):
            for seen_kind, seen_name in unseen:
                if seen_kind is kind:
                    return OverrideSource(kind, seen_name or HEURISTIC_FALLBACK_NAME)
        return None

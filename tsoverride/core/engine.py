"""
Override checker: runs classification, resolution, detection, policy and
fix synthesis for the members of a class.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..model import ClassLikeDeclaration, MemberDeclaration, TypeHierarchy
from ..types import Diagnostic, Fix, OverrideSource, PolicyConfiguration
from .classifier import display_name, member_kind_label, should_skip
from .detector import detect
from .fixer import build_fix
from .policy import FixAction, Verdict, decide
from .positions import FixPositionCalculator
from .resolver import OverrideSourceResolver

_LOG = logging.getLogger(__name__)


class OverrideChecker:
    """
    Checks members of one source text.

    Args:
        text: Full text of the file the members come from
        hierarchy: Static type information, None when unavailable
        policy: Style configuration
    """

    def __init__(
        self,
        text: str,
        hierarchy: Optional[TypeHierarchy] = None,
        policy: Optional[PolicyConfiguration] = None,
    ):
        self.policy = policy or PolicyConfiguration()
        self.resolver = OverrideSourceResolver(hierarchy)
        self.positions = FixPositionCalculator(text)

    def check(self, member: MemberDeclaration, decl: ClassLikeDeclaration) -> List[Diagnostic]:
        if should_skip(member):
            return []
        source = self.resolver.resolve(member, decl)
        state = detect(member)
        return [self._diagnostic(member, source, v) for v in decide(source, state, self.policy)]

    def check_class(self, decl: ClassLikeDeclaration) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for member in decl.members:
            diagnostics.extend(self.check(member, decl))
        return diagnostics

    def _diagnostic(self, member: MemberDeclaration, source: Optional[OverrideSource], verdict: Verdict) -> Diagnostic:
        return Diagnostic(
            message_kind=verdict.message_kind,
            member_name=display_name(member),
            member_kind_label=member_kind_label(member),
            source_kind=source.kind if source else None,
            source_name=source.name if source else None,
            fix=self._fix_for(member, verdict.action),
            start=member.start,
            end=member.end,
        )

    def _fix_for(self, member: MemberDeclaration, action: FixAction) -> Optional[Fix]:
        calc = self.positions
        try:
            if action is FixAction.ADD_TAG:
                return build_fix([calc.tag_insertion(member)])
            if action is FixAction.ADD_KEYWORD:
                return build_fix([calc.keyword_insertion(member)])
            if action is FixAction.ADD_BOTH:
                return build_fix([calc.tag_insertion(member), calc.keyword_insertion(member)])
            if action is FixAction.REMOVE_TAG:
                return build_fix(calc.tag_removal(member))
            return build_fix(calc.keyword_removal(member))
        except (IndexError, ValueError) as e:
            # Unexpected member shape: report without a fix
            _LOG.debug("No fix for %s on %r: %s", action.value, display_name(member), e)
            return None

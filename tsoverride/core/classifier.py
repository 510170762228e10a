"""
Member classification: which members take part in override analysis, and how they are labelled.
"""

from __future__ import annotations

from ..model import MemberDeclaration, MemberKind

COMPUTED_NAME = "<computed>"


def is_overload_signature(member: MemberDeclaration) -> bool:
    return not member.has_body and not member.is_abstract


def is_private(member: MemberDeclaration) -> bool:
    return member.name.is_private or member.accessibility == "private"


def should_skip(member: MemberDeclaration) -> bool:
    """
    Overload signatures, constructors, static and private members never
    override anything and are left alone.
    """
    if is_overload_signature(member):
        return True
    if member.kind is MemberKind.CONSTRUCTOR:
        return True
    if member.is_static:
        return True
    return is_private(member)


def member_kind_label(member: MemberDeclaration) -> str:
    if member.is_abstract:
        return "Abstract Method"
    if member.kind is MemberKind.GETTER:
        return "Getter"
    if member.kind is MemberKind.SETTER:
        return "Setter"
    return "Method"


def display_name(member: MemberDeclaration) -> str:
    if member.name.is_computed or member.name.text is None:
        return COMPUTED_NAME
    return member.name.text

"""
TypeScript document: turns a tree-sitter syntax tree into class declarations
for the override engine and type declarations for the type hierarchy.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Set, Tuple

from tree_sitter import Language, Node

from ..model import (
    ClassLikeDeclaration,
    Comment,
    CommentKind,
    MemberDeclaration,
    MemberKind,
    MemberName,
    Token,
    TypeReference,
)
from ..types import SourceKind
from .hierarchy import DeclaredType
from .tree_sitter_support import TreeSitterDocument

# Members the engine checks
MEMBER_NODE_TYPES = {"method_definition", "method_signature", "abstract_method_signature"}

# Members that populate a class member table
TABLE_NODE_TYPES = MEMBER_NODE_TYPES | {"public_field_definition"}

# Members that populate an interface or object type member table
SIGNATURE_NODE_TYPES = {"method_signature", "property_signature"}

_WS = re.compile(r"\s+")


class TypeScriptDocument(TreeSitterDocument):

    def get_language(self) -> Language:
        import tree_sitter_typescript as tsts
        if self.ext == "tsx":
            # TS and TSX have two different grammars in one package
            return Language(tsts.language_tsx())
        return Language(tsts.language_typescript())

    def get_query_definitions(self) -> Dict[str, str]:
        from .queries import QUERIES
        return QUERIES

    # ---------- classes for the engine ----------

    def class_declarations(self) -> List[ClassLikeDeclaration]:
        """All class declarations and class expressions, outermost first."""
        return [self._class_declaration(node) for node, _ in self.query("classes")]

    def _class_declaration(self, node: Node) -> ClassLikeDeclaration:
        name_node = node.child_by_field_name("name")
        superclass, implements = self._class_heritage(node)
        body = node.child_by_field_name("body")
        members: List[MemberDeclaration] = []
        if body is not None:
            for child in body.named_children:
                if child.type in MEMBER_NODE_TYPES:
                    member = self._member(child)
                    if member is not None:
                        members.append(member)
        start, end = self.get_node_range(node)
        return ClassLikeDeclaration(
            name=self.get_node_text(name_node) if name_node is not None else None,
            superclass=superclass,
            implements=tuple(implements),
            members=tuple(members),
            start=start,
            end=end,
        )

    def _class_heritage(self, node: Node) -> Tuple[Optional[TypeReference], List[TypeReference]]:
        superclass: Optional[TypeReference] = None
        implements: List[TypeReference] = []
        for child in node.children:
            if child.type != "class_heritage":
                continue
            for clause in child.named_children:
                if clause.type == "extends_clause":
                    value = self._extends_value(clause)
                    if value is not None:
                        superclass = self._type_ref(value)
                elif clause.type == "implements_clause":
                    implements.extend(self._type_ref(t) for t in clause.named_children if t.type != "comment")
        return superclass, implements

    @staticmethod
    def _extends_value(clause: Node) -> Optional[Node]:
        values = clause.children_by_field_name("value")
        if values:
            return values[0]
        for child in clause.named_children:
            if child.type not in ("type_arguments", "comment"):
                return child
        return None

    def _type_ref(self, node: Node) -> TypeReference:
        target = node
        if node.type == "generic_type":
            target = node.child_by_field_name("name") or (node.named_children[0] if node.named_children else node)
        return TypeReference(self._ref_name(target), self.get_node_text(node))

    def _ref_name(self, node: Node) -> Optional[str]:
        if node.type in ("identifier", "type_identifier"):
            return self.get_node_text(node)
        if node.type in ("member_expression", "nested_type_identifier"):
            return _WS.sub("", self.get_node_text(node))
        return None

    def _member(self, node: Node) -> Optional[MemberDeclaration]:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        name = self._member_name(name_node)

        tokens: List[Token] = []
        inner_comments: List[Comment] = []
        child_types: Set[str] = set()
        accessibility: Optional[str] = None
        for child in node.children:
            if child.type == "decorator":
                continue
            if child.type == "comment":
                # Only comments before the name are reached
                inner_comments.append(self._comment(child))
                continue
            if child.type == "accessibility_modifier":
                accessibility = self.get_node_text(child).strip()
            child_types.add(child.type)
            for leaf in self.leaves(child):
                if leaf.type == "comment" or leaf.start_byte == leaf.end_byte:
                    continue
                start, end = self.get_node_range(leaf)
                tokens.append(Token(self.get_node_text(leaf), start, end))
            if child.start_byte == name_node.start_byte and child.type == name_node.type:
                break

        modifiers = [tok.value for tok in tokens if tok.start < name.start]
        if "get" in child_types:
            kind = MemberKind.GETTER
        elif "set" in child_types:
            kind = MemberKind.SETTER
        elif name_node.type == "property_identifier" and name.text == "constructor":
            kind = MemberKind.CONSTRUCTOR
        else:
            kind = MemberKind.METHOD

        body = node.child_by_field_name("body")
        start, comments = self._leading(node)
        _, end = self.get_node_range(node)
        return MemberDeclaration(
            kind=kind,
            name=name,
            start=start,
            end=end,
            tokens=tuple(tokens),
            leading_comments=tuple(comments + inner_comments),
            accessibility=accessibility,
            is_static="static" in child_types,
            is_abstract=node.type == "abstract_method_signature" or "abstract" in child_types,
            is_async="async" in child_types,
            has_override_keyword="override_modifier" in child_types or "override" in modifiers,
            has_body=body is not None,
            body_start=self.get_node_range(body)[0] if body is not None else None,
        )

    def _member_name(self, node: Node) -> MemberName:
        start, end = self.get_node_range(node)
        text = self.get_node_text(node)
        if node.type == "computed_property_name":
            return MemberName(None, start, end, is_computed=True)
        if node.type == "private_property_identifier":
            return MemberName(text, start, end, is_private=True)
        if node.type == "string":
            return MemberName(text[1:-1], start, end)
        return MemberName(text, start, end)

    def _leading(self, node: Node) -> Tuple[int, List[Comment]]:
        """Start of the member (first decorator) and the comments right before it."""
        start_node = node
        comments: List[Comment] = []
        prev = node.prev_sibling
        while prev is not None:
            if prev.type == "decorator":
                start_node = prev
            elif prev.type == "comment":
                if self._is_trailing(prev):
                    break
                comments.append(self._comment(prev))
            else:
                break
            prev = prev.prev_sibling
        comments.reverse()
        return self.byte_to_char_position(start_node.start_byte), comments

    def _is_trailing(self, comment: Node) -> bool:
        # A line comment on the same line as the previous member belongs to it
        if not self.get_node_text(comment).startswith("//"):
            return False
        before = comment.prev_sibling
        if before is None or before.type in ("{", "comment", "decorator"):
            return False
        return before.end_point[0] == comment.start_point[0]

    def _comment(self, node: Node) -> Comment:
        start, end = self.get_node_range(node)
        text = self.get_node_text(node)
        if text.startswith("/*"):
            value = text[2:-2] if len(text) >= 4 and text.endswith("*/") else text[2:]
            return Comment(CommentKind.BLOCK, value, start, end)
        return Comment(CommentKind.LINE, text[2:], start, end)

    # ---------- declarations for the type hierarchy ----------

    def declared_types(self) -> List[DeclaredType]:
        """Named classes, interfaces and object type aliases with their instance member names."""
        declared: List[DeclaredType] = []

        for node, _ in self.query("classes"):
            name_node = node.child_by_field_name("name")
            if name_node is None:
                continue
            superclass, implements = self._class_heritage(node)
            bases: List[Tuple[TypeReference, SourceKind]] = []
            if superclass is not None:
                bases.append((superclass, SourceKind.CLASS))
            bases.extend((ref, SourceKind.INTERFACE) for ref in implements)
            body = node.child_by_field_name("body")
            declared.append(DeclaredType(
                name=self.get_node_text(name_node),
                kind=SourceKind.CLASS,
                members=self._class_member_names(body),
                bases=bases,
            ))

        for node, capture in self.query("interfaces"):
            if capture != "interface":
                continue
            bases = []
            for child in node.children:
                if child.type == "extends_type_clause":
                    bases.extend(
                        (self._type_ref(t), SourceKind.INTERFACE)
                        for t in child.named_children if t.type != "comment"
                    )
            declared.append(DeclaredType(
                name=self.get_node_text(node.child_by_field_name("name")),
                kind=SourceKind.INTERFACE,
                members=self._signature_names(node.child_by_field_name("body")),
                bases=bases,
            ))

        for node, capture in self.query("object_types"):
            if capture != "type_alias":
                continue
            declared.append(DeclaredType(
                name=self.get_node_text(node.child_by_field_name("name")),
                kind=SourceKind.INTERFACE,
                members=self._signature_names(node.child_by_field_name("value")),
            ))

        return declared

    def _class_member_names(self, body: Optional[Node]) -> Set[str]:
        names: Set[str] = set()
        if body is None:
            return names
        for child in body.named_children:
            if child.type not in TABLE_NODE_TYPES:
                continue
            if any(c.type == "static" for c in child.children):
                continue
            name_node = child.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._member_name(name_node)
            if name.text is not None and name.text != "constructor":
                names.add(name.text)
        return names

    def _signature_names(self, body: Optional[Node]) -> Set[str]:
        names: Set[str] = set()
        if body is None:
            return names
        for child in body.named_children:
            if child.type not in SIGNATURE_NODE_TYPES:
                continue
            name_node = child.child_by_field_name("name")
            if name_node is None:
                continue
            name = self._member_name(name_node)
            if name.text is not None:
                names.add(name.text)
        return names

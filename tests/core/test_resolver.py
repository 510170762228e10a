"""
Tests for override source resolution against stub type hierarchies.
"""

from typing import Dict, Iterable, List, Optional

from tsoverride.core.resolver import OverrideSourceResolver, heuristic_source
from tsoverride.model import ClassLikeDeclaration, MemberTable, TypeReference
from tsoverride.types import OverrideSource, SourceKind
from tests.infrastructure.file_utils import src
from tests.infrastructure.members import class_decl, member, table

TEXT = src("""
    class Subject {
      run() {}
      [key]() {}
    }
""")
RUN = member(TEXT, "run")
COMPUTED = member(TEXT, "[key]")


class StubHierarchy:
    """Member tables by name; names listed in ``failing`` raise on lookup."""

    def __init__(self, tables: Dict[str, MemberTable], bases: Iterable[MemberTable] = (), failing=()):
        self.tables = tables
        self.bases = list(bases)
        self.failing = set(failing)
        self.lookups: List[str] = []

    def lookup(self, ref: TypeReference) -> Optional[MemberTable]:
        self.lookups.append(ref.text)
        if ref.name in self.failing:
            raise RuntimeError(f"cannot resolve {ref.name}")
        return self.tables.get(ref.name)

    def base_types(self, decl: ClassLikeDeclaration) -> Iterable[MemberTable]:
        return iter(self.bases)


class TestResolution:

    def test_interface_member(self):
        h = StubHierarchy({"Runner": table("Runner", SourceKind.INTERFACE, "run")})
        decl = class_decl(implements=["Runner"])
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.INTERFACE, "Runner")

    def test_superclass_member(self):
        h = StubHierarchy({"Base": table("Base", SourceKind.CLASS, "run")})
        decl = class_decl(extends="Base")
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "Base")

    def test_interface_takes_precedence_over_superclass(self):
        h = StubHierarchy({
            "Base": table("Base", SourceKind.CLASS, "run"),
            "Runner": table("Runner", SourceKind.INTERFACE, "run"),
        })
        decl = class_decl(extends="Base", implements=["Runner"])
        source = OverrideSourceResolver(h).resolve(RUN, decl)
        assert source.kind is SourceKind.INTERFACE

    def test_interfaces_in_declaration_order(self):
        h = StubHierarchy({
            "First": table("First", SourceKind.INTERFACE, "run"),
            "Second": table("Second", SourceKind.INTERFACE, "run"),
        })
        decl = class_decl(implements=["Second", "First"])
        assert OverrideSourceResolver(h).resolve(RUN, decl).name == "Second"

    def test_grandparent_via_base_walk(self):
        h = StubHierarchy(
            {"Mid": table("Mid", SourceKind.CLASS, "other")},
            bases=[table("Mid", SourceKind.CLASS, "other"), table("Root", SourceKind.CLASS, "run")],
        )
        decl = class_decl(extends="Mid")
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "Root")

    def test_base_walk_keeps_base_nature(self):
        h = StubHierarchy(
            {"Mid": table("Mid", SourceKind.CLASS)},
            bases=[table("Mid", SourceKind.CLASS), table("Runnable", SourceKind.INTERFACE, "run")],
        )
        decl = class_decl(extends="Mid")
        assert OverrideSourceResolver(h).resolve(RUN, decl).kind is SourceKind.INTERFACE

    def test_unnamed_base_gets_placeholder_name(self):
        h = StubHierarchy({}, bases=[table(None, SourceKind.CLASS, "run")])
        decl = class_decl(extends="Mid")
        h.tables["Mid"] = table("Mid", SourceKind.CLASS)
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "<base>")

    def test_own_member(self):
        h = StubHierarchy({"Base": table("Base", SourceKind.CLASS, "stop")}, bases=[table("Base", SourceKind.CLASS, "stop")])
        assert OverrideSourceResolver(h).resolve(RUN, class_decl(extends="Base")) is None

    def test_no_heritage(self):
        # A class without heritage clauses overrides nothing, whatever the hierarchy yields
        h = StubHierarchy({}, bases=[table("Stray", SourceKind.CLASS, "run")])
        assert OverrideSourceResolver(h).resolve(RUN, class_decl()) is None
        assert h.lookups == []

    def test_computed_name_is_never_resolved(self):
        h = StubHierarchy({"Base": table("Base", SourceKind.CLASS, "run")})
        assert OverrideSourceResolver(h).resolve(COMPUTED, class_decl(extends="Base")) is None
        assert h.lookups == []

    def test_idempotent(self):
        h = StubHierarchy({
            "Base": table("Base", SourceKind.CLASS, "run"),
            "Runner": table("Runner", SourceKind.INTERFACE, "run"),
        })
        decl = class_decl(extends="Base", implements=["Runner"])
        resolver = OverrideSourceResolver(h)
        assert resolver.resolve(RUN, decl) == resolver.resolve(RUN, decl)


class TestFailures:

    def test_failing_interface_lookup_falls_through_to_superclass(self):
        h = StubHierarchy({"Base": table("Base", SourceKind.CLASS, "run")}, failing={"Broken"})
        decl = class_decl(extends="Base", implements=["Broken"])
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "Base")

    def test_failing_lookup_is_not_a_guess(self):
        h = StubHierarchy({}, failing={"Broken"})
        decl = class_decl(implements=["Broken"])
        assert OverrideSourceResolver(h).resolve(RUN, decl) is None

    def test_failing_base_walk(self):
        class Exploding(StubHierarchy):
            def base_types(self, decl):
                yield table("Mid", SourceKind.CLASS)
                raise RuntimeError("broken hierarchy")

        h = Exploding({"Mid": table("Mid", SourceKind.CLASS)})
        assert OverrideSourceResolver(h).resolve(RUN, class_decl(extends="Mid")) is None


class TestHeuristics:

    def test_no_hierarchy_prefers_first_interface(self):
        decl = class_decl(extends="Base", implements=["First", "Second"])
        assert OverrideSourceResolver(None).resolve(RUN, decl) == OverrideSource(SourceKind.INTERFACE, "First")

    def test_no_hierarchy_superclass(self):
        decl = class_decl(extends="Base")
        assert OverrideSourceResolver(None).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "Base")

    def test_no_hierarchy_no_heritage(self):
        assert heuristic_source(class_decl()) is None

    def test_unnamed_reference(self):
        decl = ClassLikeDeclaration(name="Subject", superclass=TypeReference(None, "mixin(Base)"))
        assert heuristic_source(decl) == OverrideSource(SourceKind.CLASS, "unknown")

    def test_unknown_superclass_is_guessed(self):
        h = StubHierarchy({})
        decl = class_decl(extends="React.Component")
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "React.Component")

    def test_unknown_interface_wins_over_unknown_superclass(self):
        h = StubHierarchy({})
        decl = class_decl(extends="External", implements=["Listener"])
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.INTERFACE, "Listener")

    def test_known_match_beats_guess(self):
        h = StubHierarchy({"Base": table("Base", SourceKind.CLASS, "run")})
        decl = class_decl(extends="Base", implements=["Unknown"])
        assert OverrideSourceResolver(h).resolve(RUN, decl) == OverrideSource(SourceKind.CLASS, "Base")

    def test_incomplete_grandparent_is_guessed(self):
        h = StubHierarchy(
            {"Mid": table("Mid", SourceKind.CLASS)},
            bases=[table("Mid", SourceKind.CLASS), MemberTable("External", SourceKind.CLASS, complete=False)],
        )
        assert OverrideSourceResolver(h).resolve(RUN, class_decl(extends="Mid")) == OverrideSource(SourceKind.CLASS, "External")

    def test_fully_known_hierarchy_without_match(self):
        h = StubHierarchy(
            {"Mid": table("Mid", SourceKind.CLASS)},
            bases=[table("Mid", SourceKind.CLASS), table("Root", SourceKind.CLASS, "stop")],
        )
        assert OverrideSourceResolver(h).resolve(RUN, class_decl(extends="Mid")) is None


def test_resolution_does_not_mutate_hierarchy():
    tables = {"Base": table("Base", SourceKind.CLASS, "run")}
    h = StubHierarchy(dict(tables))
    OverrideSourceResolver(h).resolve(RUN, class_decl(extends="Base"))
    assert h.tables == tables

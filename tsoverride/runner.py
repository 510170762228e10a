"""
Lint and fix runs over single texts and whole projects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import OverrideConfig
from .core import OverrideChecker
from .files import collect_files, is_declaration_file, read_text, write_text
from .host import DeclaredTypeHierarchy, TypeScriptDocument
from .model import TypeHierarchy
from .range_edits import RangeEditor
from .types import Diagnostic

_LOG = logging.getLogger(__name__)


def ext_of(path: Path) -> str:
    """Grammar key for a file: ``tsx`` or ``ts``."""
    return "tsx" if path.suffix.lower() == ".tsx" else "ts"


def line_col(text: str, offset: int) -> Tuple[int, int]:
    """1-based line and column of a character offset."""
    line = text.count("\n", 0, offset) + 1
    col = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, col


def _effective_hierarchy(
    doc: TypeScriptDocument,
    config: OverrideConfig,
    hierarchy: Optional[TypeHierarchy],
) -> Optional[TypeHierarchy]:
    if not config.type_info:
        return None
    if hierarchy is not None:
        return hierarchy
    return DeclaredTypeHierarchy.from_documents([doc])


def lint_document(
    doc: TypeScriptDocument,
    *,
    config: OverrideConfig,
    hierarchy: Optional[TypeHierarchy],
    label: str = "<text>",
) -> List[Diagnostic]:
    if doc.has_error():
        _LOG.warning("%s: syntax errors found (%d), results may be incomplete", label, len(doc.get_errors()))
    checker = OverrideChecker(doc.text, hierarchy, config.policy())
    diagnostics: List[Diagnostic] = []
    for decl in doc.class_declarations():
        diagnostics.extend(checker.check_class(decl))
    diagnostics.sort(key=lambda d: d.start)
    return diagnostics


def lint_text(
    text: str,
    *,
    ext: str = "ts",
    config: Optional[OverrideConfig] = None,
    hierarchy: Optional[TypeHierarchy] = None,
    label: str = "<text>",
) -> List[Diagnostic]:
    """
    Check one source text.

    Without an explicit hierarchy the types declared in the text itself are used.
    """
    config = config or OverrideConfig()
    doc = TypeScriptDocument(text, ext)
    return lint_document(doc, config=config, hierarchy=_effective_hierarchy(doc, config, hierarchy), label=label)


@dataclass
class FixOutcome:
    text: str
    fixes_applied: int
    passes: int
    remaining: List[Diagnostic] = field(default_factory=list)


def fix_text(
    text: str,
    *,
    ext: str = "ts",
    config: Optional[OverrideConfig] = None,
    hierarchy: Optional[TypeHierarchy] = None,
    label: str = "<text>",
) -> FixOutcome:
    """
    Apply fixes until none applies or the pass limit is reached.

    Fixes that collide within one pass are retried on the next pass against
    the re-parsed text.
    """
    config = config or OverrideConfig()
    current = text
    applied = 0
    passes = 0
    while True:
        doc = TypeScriptDocument(current, ext)
        diagnostics = lint_document(
            doc, config=config, hierarchy=_effective_hierarchy(doc, config, hierarchy), label=label
        )
        if passes >= config.max_fix_passes:
            break
        editor = RangeEditor(current)
        accepted = 0
        for diag in diagnostics:
            if diag.fix is not None and diag.fix.apply_to(editor, diag.message_kind.value):
                accepted += 1
        if not accepted:
            break
        current, stats = editor.apply_edits()
        _LOG.debug("%s: pass %d applied %s", label, passes + 1, editor.get_edit_summary()["edit_types"])
        applied += accepted
        passes += 1
    return FixOutcome(current, applied, passes, diagnostics)


@dataclass
class FileResult:
    path: Path
    text: str
    diagnostics: List[Diagnostic]
    fixed_text: Optional[str] = None
    fixes_applied: int = 0

    @property
    def changed(self) -> bool:
        return self.fixed_text is not None and self.fixed_text != self.text

    @property
    def final_text(self) -> str:
        return self.fixed_text if self.fixed_text is not None else self.text


class Project:
    """
    A set of source files analysed together.

    All files, declaration files included, feed one type hierarchy;
    declaration files are not checked themselves.
    """

    def __init__(self, paths: Sequence[Path], config: OverrideConfig):
        self.config = config
        self.paths = collect_files(paths, extensions=set(config.extensions), exclude=config.exclude)
        self._texts = {p: read_text(p) for p in self.paths}
        self._documents = {p: TypeScriptDocument(t, ext_of(p)) for p, t in self._texts.items()}
        self.hierarchy: Optional[DeclaredTypeHierarchy] = None
        if config.type_info:
            self.hierarchy = DeclaredTypeHierarchy.from_documents(self._documents.values())
            _LOG.debug("Type hierarchy: %d declared types from %d files", len(self.hierarchy), len(self.paths))

    @property
    def checked_paths(self) -> List[Path]:
        return [p for p in self.paths if not is_declaration_file(p)]

    def check(self) -> List[FileResult]:
        results = []
        for path in self.checked_paths:
            diagnostics = lint_document(
                self._documents[path], config=self.config, hierarchy=self.hierarchy, label=str(path)
            )
            results.append(FileResult(path, self._texts[path], diagnostics))
        return results

    def fix(self, *, write: bool = True) -> List[FileResult]:
        results = []
        for path in self.checked_paths:
            outcome = fix_text(
                self._texts[path],
                ext=ext_of(path),
                config=self.config,
                hierarchy=self.hierarchy,
                label=str(path),
            )
            result = FileResult(path, self._texts[path], outcome.remaining, outcome.text, outcome.fixes_applied)
            if write and result.changed:
                write_text(path, outcome.text)
                _LOG.info("Fixed %s (%d fix(es))", path, outcome.fixes_applied)
            results.append(result)
        return results

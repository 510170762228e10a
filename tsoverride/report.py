"""
Run reports: pydantic models for ``--format json`` and a plain text renderer.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from .runner import FileResult, line_col
from .types import Diagnostic, OverrideStyle
from .version import tool_version


class DiagnosticOut(BaseModel):
    line: int
    column: int
    message_kind: str
    message: str
    member: str
    member_kind: str
    source_kind: Optional[str] = None
    source_name: Optional[str] = None
    fixable: bool = False


class FileReport(BaseModel):
    path: str
    diagnostics: List[DiagnosticOut] = Field(default_factory=list)
    fixes_applied: int = 0
    changed: bool = False


class RunReport(BaseModel):
    tool_version: str
    command: str
    style: str
    files_checked: int
    total: int
    fixable: int
    fixes_applied: int
    files: List[FileReport] = Field(default_factory=list)


def _diagnostic_out(diag: Diagnostic, text: str) -> DiagnosticOut:
    line, column = line_col(text, diag.start)
    return DiagnosticOut(
        line=line,
        column=column,
        message_kind=diag.message_kind.value,
        message=diag.message,
        member=diag.member_name,
        member_kind=diag.member_kind_label,
        source_kind=diag.source_kind.value if diag.source_kind else None,
        source_name=diag.source_name,
        fixable=diag.fixable,
    )


def _display_path(path: Path, base: Optional[Path]) -> str:
    if base is not None:
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def build_report(
    results: Sequence[FileResult],
    *,
    command: str,
    style: OverrideStyle,
    base: Optional[Path] = None,
) -> RunReport:
    files: List[FileReport] = []
    for res in results:
        files.append(FileReport(
            path=_display_path(res.path, base),
            diagnostics=[_diagnostic_out(d, res.final_text) for d in res.diagnostics],
            fixes_applied=res.fixes_applied,
            changed=res.changed,
        ))
    all_diags = [d for f in files for d in f.diagnostics]
    return RunReport(
        tool_version=tool_version(),
        command=command,
        style=style.value,
        files_checked=len(files),
        total=len(all_diags),
        fixable=sum(1 for d in all_diags if d.fixable),
        fixes_applied=sum(f.fixes_applied for f in files),
        files=files,
    )


def render_text(report: RunReport) -> str:
    """``path:line:col  kind  message`` lines followed by a summary."""
    lines: List[str] = []
    for f in report.files:
        for d in f.diagnostics:
            lines.append(f"{f.path}:{d.line}:{d.column}  {d.message_kind}  {d.message}")

    summary = f"{report.total} problem(s) in {report.files_checked} file(s)"
    if report.command == "fix":
        summary += f", {report.fixes_applied} fix(es) applied"
    elif report.fixable:
        summary += f", {report.fixable} fixable with `tsoverride fix`"
    lines.append(summary)
    return "\n".join(lines) + "\n"

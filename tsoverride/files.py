from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set

import pathspec

from .errors import SourceReadError

# Never entered while walking
PRUNED_DIRS = {".git", "node_modules"}


def read_text(path: Path) -> str:
    try:
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read {path}: {e}") from e


def write_text(path: Path, text: str) -> None:
    try:
        with path.open("w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise SourceReadError(f"Cannot write {path}: {e}") from e


def build_gitignore_spec(root: Path) -> Optional[pathspec.PathSpec]:
    """
    Build PathSpec from .gitignore. Return None if .gitignore is missing.
    """
    gitignore = root / ".gitignore"
    if not gitignore.is_file():
        return None
    lines = []
    for ln in gitignore.read_text(encoding="utf-8", errors="ignore").splitlines():
        ln = ln.strip()
        if ln and not ln.startswith("#"):
            lines.append(ln)
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def build_exclude_spec(patterns: Sequence[str]) -> Optional[pathspec.PathSpec]:
    if not patterns:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def _ignored(rel_posix: str, specs: List[pathspec.PathSpec]) -> bool:
    return any(spec.match_file(rel_posix) for spec in specs)


def iter_files(root: Path, *, extensions: Set[str], exclude: Sequence[str] = ()) -> Iterable[Path]:
    """
    Recursive source file iterator honouring .gitignore and exclude patterns,
    with early directory pruning.
    """
    root = root.resolve()
    specs = [s for s in (build_gitignore_spec(root), build_exclude_spec(exclude)) if s is not None]

    for dirpath, dirnames, filenames in os.walk(root):
        keep: List[str] = []
        for d in sorted(dirnames):
            if d in PRUNED_DIRS:
                continue
            rel_dir = Path(dirpath, d).relative_to(root).as_posix()
            # A matching pattern can hide a branch completely
            if _ignored(rel_dir + "/", specs):
                continue
            keep.append(d)
        dirnames[:] = keep

        for fn in sorted(filenames):
            p = Path(dirpath, fn)
            if p.suffix.lower() not in extensions:
                continue
            if _ignored(p.relative_to(root).as_posix(), specs):
                continue
            yield p


def collect_files(paths: Sequence[Path], *, extensions: Set[str], exclude: Sequence[str] = ()) -> List[Path]:
    """
    Expand CLI paths: directories are walked, files are taken as given.

    Raises:
        SourceReadError: If a path does not exist
    """
    out: List[Path] = []
    seen: Set[Path] = set()
    for path in paths:
        if path.is_dir():
            found: Iterable[Path] = iter_files(path, extensions=extensions, exclude=exclude)
        elif path.is_file():
            found = [path.resolve()]
        else:
            raise SourceReadError(f"No such file or directory: {path}")
        for p in found:
            if p not in seen:
                seen.add(p)
                out.append(p)
    return out


def is_declaration_file(path: Path) -> bool:
    """``.d.ts`` and friends: indexed for types, never checked."""
    name = path.name.lower()
    return name.endswith((".d.ts", ".d.mts", ".d.cts"))

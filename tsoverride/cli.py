from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from .config import OverrideConfig, load_config
from .errors import TSOverrideUserError
from .report import build_report, render_text
from .runner import Project
from .types import OverrideStyle
from .version import tool_version

_LOG = logging.getLogger("tsoverride")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose or os.environ.get("TSOVERRIDE_DEBUG") else logging.INFO
    _LOG.setLevel(level)
    if not _LOG.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        _LOG.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tsoverride",
        description="Check and fix override declarations (@override tag / override keyword) in TypeScript classes",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Common arguments for check/fix
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "paths",
            nargs="*",
            type=Path,
            help="files or directories to analyse (default: current directory)",
        )
        sp.add_argument(
            "--style",
            help="tag-only | keyword-only | both | either (aliases: jsdoc, keyword)",
        )
        sp.add_argument(
            "--config",
            type=Path,
            metavar="FILE",
            help="config file (default: nearest .tsoverride.yaml)",
        )
        sp.add_argument(
            "--no-type-info",
            action="store_true",
            help="do not build a type hierarchy, guess override sources from heritage clauses",
        )
        sp.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="output format",
        )
        sp.add_argument(
            "--verbose",
            action="store_true",
            help="debug logging to stderr",
        )

    sp_check = sub.add_parser("check", help="report members with missing or unnecessary override declarations")
    add_common(sp_check)

    sp_fix = sub.add_parser("fix", help="apply fixes in place")
    add_common(sp_fix)
    sp_fix.add_argument(
        "--dry-run",
        action="store_true",
        help="compute fixes and report, but do not write files",
    )

    return p


def _config(ns: argparse.Namespace, paths: List[Path]) -> OverrideConfig:
    start = paths[0] if paths else Path.cwd()
    cfg = load_config(ns.config, start=start)
    # CLI flags override file values
    if ns.style:
        cfg.style = OverrideStyle.parse(ns.style)
    if ns.no_type_info:
        cfg.type_info = False
    return cfg


def main(argv: Optional[List[str]] = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        paths = list(ns.paths) or [Path.cwd()]
        cfg = _config(ns, paths)
        project = Project(paths, cfg)

        if ns.cmd == "check":
            results = project.check()
        else:
            results = project.fix(write=not ns.dry_run)

        report = build_report(results, command=ns.cmd, style=cfg.style, base=Path.cwd().resolve())
        if ns.format == "json":
            sys.stdout.write(json.dumps(report.model_dump(mode="json"), ensure_ascii=False, indent=2) + "\n")
        else:
            sys.stdout.write(render_text(report))
        return 1 if report.total else 0

    except TSOverrideUserError as e:
        sys.stderr.write(f"Error: {str(e).rstrip()}\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())

"""Scan orchestration: discover files, parse once, run checkers, aggregate."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testcopilot.checkers.base import CheckerInput
from testcopilot.codebase import aggregate_checker_results
from testcopilot.core.registry import checkers_for, detect_framework
from testcopilot.engine.treesitter import ParseError, parse_source
from testcopilot.models import CheckerOutput, CodebaseSummary, FileFailure
from testcopilot.utils import find_test_files, rel

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    summary: CodebaseSummary
    files_found: int = 0
    skipped: list[str] = field(default_factory=list)

    @property
    def file_results(self) -> tuple[CheckerOutput, ...]:
        return self.summary.file_results

    @property
    def failures(self) -> tuple[FileFailure, ...]:
        return self.summary.failures

    @property
    def ok(self) -> bool:
        return not self.summary.failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_found": self.files_found,
            "skipped": list(self.skipped),
            **self.summary.to_dict(),
        }


def analyze_file(
    path: str, content: str, config: Mapping | None = None
) -> list[CheckerOutput]:
    """Run every enabled checker for the file's framework on one shared tree.

    Returns [] when no framework is detected. Raises ParseError when the
    source does not parse.
    """
    framework = detect_framework(path, content)
    checkers = checkers_for(framework, config)
    if not checkers:
        logger.debug("no checkers for %s (framework=%s)", path, framework)
        return []
    source = CheckerInput(path=path, content=content, tree=parse_source(content, path))
    return [checker.analyze(source) for checker in checkers]


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def scan_path(path: str | Path, config: Mapping | None = None) -> ScanResult:
    """Analyse every test file under *path*, one at a time.

    Unreadable and unparseable files become FileFailure records and the scan
    carries on; files with no recognised framework are skipped.
    """
    config = config or {}
    files = find_test_files(path, config.get("exclude") or ())
    results: list[CheckerOutput] = []
    failures: list[FileFailure] = []
    skipped: list[str] = []

    for filepath in files:
        display = rel(filepath)
        try:
            content = _read(filepath)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("read failed for %s: %s", filepath, exc)
            failures.append(FileFailure(display, f"could not read file: {exc}"))
            continue
        try:
            outputs = analyze_file(display, content, config)
        except ParseError as exc:
            logger.debug("parse failed for %s: %s", filepath, exc)
            failures.append(FileFailure(display, str(exc)))
            continue
        if not outputs:
            skipped.append(display)
            continue
        results.extend(outputs)

    logger.debug(
        "scanned %d file(s): %d result(s), %d failure(s), %d skipped",
        len(files), len(results), len(failures), len(skipped),
    )
    return ScanResult(
        summary=aggregate_checker_results(results, failures),
        files_found=len(files),
        skipped=skipped,
    )


__all__ = ["ScanResult", "analyze_file", "scan_path"]

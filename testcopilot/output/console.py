"""Terminal rendering of scan results."""

from __future__ import annotations

import json
import textwrap

from testcopilot.enums import Severity
from testcopilot.models import CheckerOutput, Issue
from testcopilot.scan import ScanResult
from testcopilot.scoring import format_score
from testcopilot.utils import colorize, print_table

SEVERITY_COLORS = {
    Severity.VERY_HIGH: "red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "cyan",
    Severity.INFO: "dim",
}


def _score_color(score: float | None) -> str:
    if score is None or score >= 90:
        return "green"
    if score >= 60:
        return "yellow"
    return "red"


def _indent(text: str, prefix: str = "      ") -> str:
    return textwrap.indent(text, prefix)


def format_issue(issue: Issue, *, explain: bool = False) -> list[str]:
    tag = colorize(f"[{str(issue.severity).upper()}]", SEVERITY_COLORS.get(issue.severity, "dim"))
    lines = [f"    {tag} {issue.message}"]
    if issue.location is not None:
        where = f"Line {issue.location.line}"
        if issue.location.column is not None:
            where += f", Col {issue.location.column}"
        lines.append(colorize(f"      {where}", "dim"))
    if issue.context_code:
        lines.append(colorize(f"      > {issue.context_code}", "cyan"))
    if explain:
        if issue.plain_explanation:
            lines.append(_indent(f"Why: {issue.plain_explanation}"))
        if issue.fix:
            lines.append(_indent(f"Fix: {issue.fix}"))
    return lines


def render_file_result(result: CheckerOutput, *, explain: bool = False, file_summary: bool = True) -> None:
    score = format_score(result.numeric_score)
    header = f"  {result.file_path}  [{result.checker_name}]"
    print(colorize(header, "bold"))
    print(f"    Score: {colorize(score, _score_color(result.numeric_score))} ({result.file_score})")
    if not result.issues:
        print(colorize("    No issues found.", "green"))
    for issue in result.issues:
        for line in format_issue(issue, explain=explain):
            print(line)
    if file_summary:
        print()
        print(_indent(result.plain_summary, "    "))
    print()


def render_scan(
    result: ScanResult,
    *,
    explain: bool = False,
    file_summary: bool = True,
    codebase: bool = True,
) -> None:
    """Print every file result, then failures, then the codebase roll-up."""
    summary = result.summary
    if not summary.file_results and not summary.failures:
        print(colorize("\n  No test files analysed.\n", "yellow"))
        return

    print(colorize(f"\n  Test reliability report ({result.files_found} file(s) found)\n", "bold"))
    for file_result in summary.file_results:
        render_file_result(file_result, explain=explain, file_summary=file_summary)

    if summary.failures:
        print(colorize(f"  {len(summary.failures)} file(s) could not be analysed:", "red"))
        for failure in summary.failures:
            print(f"    {failure.file_path}: {failure.reason}")
        print()

    if result.skipped:
        print(colorize(f"  Skipped {len(result.skipped)} file(s) with no recognised framework.", "dim"))
        print()

    if codebase and summary.file_results:
        rows = [
            [key, str(counts["file_count"]), str(counts["issue_count"])]
            for key, counts in sorted(summary.per_checker_breakdown.items())
        ]
        print_table(["Checker", "Files flagged", "Issues"], rows)
        print()
        print(_indent(summary.plain_summary, "  "))
        print()


def render_json(result: ScanResult) -> None:
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


__all__ = ["format_issue", "render_file_result", "render_json", "render_scan"]

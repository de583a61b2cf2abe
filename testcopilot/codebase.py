"""Roll per-file checker outputs up into one codebase summary."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from testcopilot.enums import Grade
from testcopilot.models import CheckerOutput, CodebaseSummary, FileFailure
from testcopilot.scoring import average_score, grade_score


def build_codebase_summary(
    overall_grade: Grade, overall_score: float, files_analyzed: int, files_with_issues: int
) -> str:
    lines = [
        f"Codebase reliability rating: {overall_grade} (score: {overall_score:.1f})",
        "",
        f"Analyzed {files_analyzed} test files.",
    ]
    if files_with_issues == 0:
        lines.append("✅ All files show strong async practices and reliability.")
    else:
        lines.append(
            f"⚠️ {files_with_issues} file(s) contain patterns that may cause flakiness "
            "or unreliable results."
        )
    lines.extend([
        "",
        "Improving flagged files will make your test suite more stable and "
        "trustworthy for the whole team.",
    ])
    return "\n".join(lines)


def aggregate_checker_results(
    file_results: Sequence[CheckerOutput],
    failures: Iterable[FileFailure] = (),
) -> CodebaseSummary:
    """Average file scores and count issues per checker.

    ``per_checker_breakdown[key]["file_count"]`` counts files where that
    checker reported at least one issue.
    """
    overall_score = average_score(result.numeric_score for result in file_results)
    overall_grade = grade_score(overall_score)

    breakdown: dict[str, dict[str, int]] = {}
    files_with_issues: set[str] = set()
    for result in file_results:
        entry = breakdown.setdefault(result.checker_name, {"file_count": 0, "issue_count": 0})
        if result.issues:
            entry["file_count"] += 1
            entry["issue_count"] += len(result.issues)
            files_with_issues.add(result.file_path)

    files_analyzed = len({result.file_path for result in file_results})
    return CodebaseSummary(
        overall_score=overall_score,
        overall_grade=overall_grade,
        file_results=tuple(file_results),
        total_issues=sum(len(result.issues) for result in file_results),
        files_analyzed=files_analyzed,
        per_checker_breakdown=breakdown,
        plain_summary=build_codebase_summary(
            overall_grade, overall_score, files_analyzed, len(files_with_issues)
        ),
        failures=tuple(failures),
    )


__all__ = ["aggregate_checker_results", "build_codebase_summary"]

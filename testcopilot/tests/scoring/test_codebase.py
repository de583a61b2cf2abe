"""Tests for codebase-level aggregation."""

from __future__ import annotations

from testcopilot.codebase import aggregate_checker_results, build_codebase_summary
from testcopilot.enums import Grade, Severity
from testcopilot.models import CheckerOutput, FileFailure, Issue


def _output(path: str, score: float, issues: int = 0, checker: str = "raceConditionAnalysis"):
    return CheckerOutput(
        checker_name=checker,
        file_path=path,
        issues=tuple(Issue(message="m", severity=Severity.MEDIUM) for _ in range(issues)),
        file_score=Grade.EXCELLENT,
        numeric_score=score,
        plain_summary="",
    )


def test_empty_codebase_is_perfect():
    summary = aggregate_checker_results([])
    assert summary.overall_score == 100.0
    assert summary.overall_grade == Grade.EXCELLENT
    assert summary.files_analyzed == 0
    assert summary.total_issues == 0
    assert summary.per_checker_breakdown == {}


def test_scores_are_averaged_and_graded():
    summary = aggregate_checker_results([
        _output("a.cy.js", 100.0),
        _output("b.cy.js", 24.0, issues=1),
    ])
    assert summary.overall_score == 62.0
    assert summary.overall_grade == Grade.FAIR
    assert summary.total_issues == 1
    assert summary.files_analyzed == 2


def test_breakdown_counts_files_with_issues():
    summary = aggregate_checker_results([
        _output("a.cy.js", 100.0),
        _output("b.cy.js", 70.0, issues=2),
        _output("c.spec.ts", 50.0, issues=3, checker="playwrightHardWaits"),
    ])
    assert summary.per_checker_breakdown == {
        "raceConditionAnalysis": {"file_count": 1, "issue_count": 2},
        "playwrightHardWaits": {"file_count": 1, "issue_count": 3},
    }


def test_failures_are_carried_through():
    failure = FileFailure("broken.cy.js", "syntax error")
    summary = aggregate_checker_results([], [failure])
    assert summary.failures == (failure,)
    assert summary.to_dict()["failures"] == [{"file_path": "broken.cy.js", "reason": "syntax error"}]


def test_summary_text_with_flagged_files():
    text = build_codebase_summary(Grade.FAIR, 62.0, 2, 1)
    lines = text.splitlines()
    assert lines[0] == "Codebase reliability rating: C - Fair (score: 62.0)"
    assert lines[2] == "Analyzed 2 test files."
    assert lines[3].startswith("⚠️ 1 file(s) contain patterns")


def test_summary_text_when_clean():
    text = build_codebase_summary(Grade.EXCELLENT, 100.0, 3, 0)
    assert "✅ All files show strong async practices and reliability." in text
    assert "(score: 100.0)" in text


def test_to_dict_is_json_ready():
    summary = aggregate_checker_results([_output("a.cy.js", 90.0, issues=1)])
    payload = summary.to_dict()
    assert payload["overall_grade"] == "A - Excellent"
    assert payload["file_results"][0]["issues"][0]["severity"] == "medium"

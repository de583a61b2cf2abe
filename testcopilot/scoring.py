"""Issue list -> 0-100 reliability score -> grade label."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence

from testcopilot.enums import Grade, Severity
from testcopilot.models import Issue

PASS_WEIGHT = 70
ISSUE_BUDGET = 30

SEVERITY_PENALTY: dict[Severity, float] = {
    Severity.VERY_HIGH: 1.5,
    Severity.HIGH: 6,
    Severity.MEDIUM: 3,
    Severity.LOW: 1.5,
    Severity.INFO: 1.5,
}

# (minimum score, grade), checked top-down.
GRADE_THRESHOLDS: tuple[tuple[float, Grade], ...] = (
    (90, Grade.EXCELLENT),
    (75, Grade.GOOD),
    (60, Grade.FAIR),
    (40, Grade.MODERATE_RISK),
)


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def _failing_tests(
    issues: Sequence[Issue],
    num_tests: int,
    test_issue_map: Mapping[int, Sequence[Issue]] | None,
) -> int:
    if test_issue_map is None:
        return num_tests if issues else 0
    return sum(1 for i in range(num_tests) if test_issue_map.get(i))


def calculate_score(
    issues: Sequence[Issue],
    num_tests: int,
    test_issue_map: Mapping[int, Sequence[Issue]] | None = None,
) -> float:
    """Blend the share of clean tests (70 pts) with an issue-severity budget (30 pts).

    ``test_issue_map`` maps test-block index to the issues inside that block.
    When it is None, every test counts as failing as soon as the file has any
    issue at all.
    """
    num_tests = max(1, num_tests)
    failing = _failing_tests(issues, num_tests, test_issue_map)
    pass_score = PASS_WEIGHT * (num_tests - failing) / num_tests
    penalty = sum(SEVERITY_PENALTY.get(issue.severity, 1.5) for issue in issues)
    total = pass_score + ISSUE_BUDGET - penalty
    return round1(min(100.0, max(0.0, total)))


def format_score(score: float | None) -> str:
    """``100.0`` -> ``"100"``, ``87.5`` -> ``"87.5"``."""
    if score is None:
        return "n/a"
    return str(int(score)) if float(score).is_integer() else str(score)


def grade_score(score: float) -> Grade:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.HIGH_RISK


def average_score(scores: Iterable[float | None]) -> float:
    """Mean of per-file scores; a missing score counts as 100, no files -> 100."""
    values = [100.0 if score is None else score for score in scores]
    if not values:
        return 100.0
    return max(0.0, round1(sum(values) / len(values)))


__all__ = [
    "GRADE_THRESHOLDS",
    "SEVERITY_PENALTY",
    "average_score",
    "calculate_score",
    "format_score",
    "grade_score",
    "round1",
]

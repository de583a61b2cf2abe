"""Tests for the score formula, grading and averaging."""

from __future__ import annotations

import pytest

from testcopilot.enums import Grade, Severity
from testcopilot.models import Issue, Location
from testcopilot.scoring import (
    average_score,
    calculate_score,
    format_score,
    grade_score,
    round1,
)


def _issue(severity: Severity = Severity.HIGH, line: int = 3) -> Issue:
    return Issue(message="m", severity=severity, location=Location(line=line))


class TestCalculateScore:
    def test_no_issues_is_perfect(self):
        assert calculate_score([], 4, {}) == 100.0
        assert calculate_score([], 0) == 100.0

    def test_one_failing_test_of_four(self):
        issue = _issue()
        # 70 * 3/4 + 30 - 6
        assert calculate_score([issue], 4, {1: [issue]}) == 76.5

    def test_without_a_map_every_test_fails(self):
        assert calculate_score([_issue()], 4, None) == 24.0

    def test_empty_map_means_no_test_owns_an_issue(self):
        assert calculate_score([_issue()], 4, {}) == 94.0

    def test_zero_tests_counts_as_one(self):
        issue = _issue()
        assert calculate_score([issue], 0, {}) == 94.0
        assert calculate_score([issue], 0, None) == 24.0

    @pytest.mark.parametrize(
        "severity,expected",
        [
            (Severity.VERY_HIGH, 28.5),
            (Severity.HIGH, 24.0),
            (Severity.MEDIUM, 27.0),
            (Severity.LOW, 28.5),
            (Severity.INFO, 28.5),
        ],
    )
    def test_severity_penalties(self, severity, expected):
        assert calculate_score([_issue(severity)], 1) == expected

    def test_very_high_weighs_like_low(self):
        # Only high and medium carry their own weight.
        assert calculate_score([_issue(Severity.VERY_HIGH)], 1, {}) == 98.5
        assert calculate_score([_issue(Severity.VERY_HIGH)], 1, {}) == calculate_score(
            [_issue(Severity.LOW)], 1, {}
        )

    def test_clamped_at_zero(self):
        issues = [_issue() for _ in range(10)]
        assert calculate_score(issues, 1) == 0.0

    def test_rounded_to_one_decimal(self):
        issue = _issue(Severity.MEDIUM)
        # 70 * 2/3 + 30 - 3 = 73.666...
        assert calculate_score([issue], 3, {0: [issue]}) == 73.7

    def test_adding_an_issue_never_raises_the_score(self):
        issues = [_issue(Severity.LOW)]
        before = calculate_score(issues, 2, {0: issues})
        more = issues + [_issue(Severity.MEDIUM)]
        after = calculate_score(more, 2, {0: more})
        assert after <= before

    @pytest.mark.parametrize("num_tests", [1, 2, 5])
    def test_adding_a_high_issue_in_a_new_test_never_raises_the_score(self, num_tests):
        low = _issue(Severity.LOW)
        high = _issue(Severity.HIGH)
        before = calculate_score([low], num_tests, {0: [low]})
        after = calculate_score([low, high], num_tests, {0: [low], num_tests - 1: [high]})
        assert after <= before
        assert grade_score(after) == grade_score(calculate_score([low, high], num_tests, {0: [low], num_tests - 1: [high]}))


class TestRound1:
    def test_half_rounds_up(self):
        assert round1(0.25) == 0.3

    def test_plain_values(self):
        assert round1(24.0) == 24.0
        assert round1(73.66) == 73.7


class TestGradeScore:
    @pytest.mark.parametrize(
        "score,grade",
        [
            (100.0, Grade.EXCELLENT),
            (90.0, Grade.EXCELLENT),
            (89.9, Grade.GOOD),
            (75.0, Grade.GOOD),
            (74.9, Grade.FAIR),
            (60.0, Grade.FAIR),
            (59.9, Grade.MODERATE_RISK),
            (40.0, Grade.MODERATE_RISK),
            (39.9, Grade.HIGH_RISK),
            (0.0, Grade.HIGH_RISK),
        ],
    )
    def test_thresholds(self, score, grade):
        assert grade_score(score) == grade

    def test_grade_labels(self):
        assert str(Grade.EXCELLENT) == "A - Excellent"
        assert str(Grade.HIGH_RISK) == "E - High Risk"


class TestAverageScore:
    def test_mean_rounded(self):
        assert average_score([100.0, 24.0, 76.5]) == 66.8

    def test_no_files(self):
        assert average_score([]) == 100.0

    def test_missing_score_counts_as_perfect(self):
        assert average_score([None, 50.0]) == 75.0


class TestFormatScore:
    def test_integral_scores_drop_the_decimal(self):
        assert format_score(100.0) == "100"
        assert format_score(24.0) == "24"

    def test_fractional_scores_keep_it(self):
        assert format_score(76.5) == "76.5"

    def test_missing(self):
        assert format_score(None) == "n/a"

"""Tests for the PNG scorecard."""

from __future__ import annotations

import pytest

from testcopilot.codebase import aggregate_checker_results
from testcopilot.enums import Grade
from testcopilot.models import CheckerOutput, FileFailure

Image = pytest.importorskip("PIL.Image")

from testcopilot.output.scorecard import generate_scorecard  # noqa: E402


def _summary(count: int, failures=()):
    outputs = [
        CheckerOutput(
            checker_name="raceConditionAnalysis",
            file_path=f"cypress/e2e/{i}.cy.js",
            issues=(),
            file_score=Grade.EXCELLENT,
            numeric_score=100.0 - i,
            plain_summary="",
        )
        for i in range(count)
    ]
    return aggregate_checker_results(outputs, failures)


def test_writes_png(tmp_path):
    path = generate_scorecard(_summary(3), tmp_path / "card.png")
    assert path == tmp_path / "card.png"
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.width == 920


def test_row_count_drives_height(tmp_path):
    small = generate_scorecard(_summary(1), tmp_path / "small.png")
    large = generate_scorecard(_summary(5), tmp_path / "large.png")
    with Image.open(small) as a, Image.open(large) as b:
        assert b.height > a.height


def test_empty_scan_and_failures(tmp_path):
    summary = _summary(0, [FileFailure("broken.cy.js", "syntax error")])
    path = generate_scorecard(summary, tmp_path / "nested" / "card.png")
    assert path.exists()

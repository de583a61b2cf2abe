"""Cypress async-reliability checker: hard waits, alias waits, unverified actions,
broken command chains."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from testcopilot.checkers.base import CheckerInput
from testcopilot.checkers.context import AnalysisContext
from testcopilot.checkers.cypress._actions import check_actions
from testcopilot.checkers.cypress._chains import check_chains
from testcopilot.checkers.cypress._waits import check_waits, collect_aliases
from testcopilot.engine.queries import (
    find_action_sites,
    find_assertion_lines,
    find_test_blocks,
    map_issues_to_test_blocks,
)
from testcopilot.enums import Framework, Grade
from testcopilot.models import CheckerOutput, Issue
from testcopilot.scoring import calculate_score, format_score, grade_score

logger = logging.getLogger(__name__)

POSITIVE_SUMMARY = (
    "✅ It shows strong async practices — using retryable assertions or intercepts "
    "instead of fixed waits."
)
FLAKINESS_SUMMARY = (
    "⚠️ It contains patterns that may cause flakiness, such as hardcoded waits, "
    "missing intercepts, or UI actions without follow-up checks.",
    "",
    "These issues mean the tests might pass even when the app is broken, or fail "
    "when the app is actually working — leading to wasted time debugging false results.",
    "",
    "Improving these tests will make them more stable, trustworthy, and maintainable "
    "for both developers and QA teams.",
)


def reliability_summary(
    issues: Sequence[Issue], file_score: Grade, numeric_score: float | None
) -> str:
    lines = [
        f"This test file was rated {file_score} for async reliability "
        f"(score: {format_score(numeric_score)}).",
        "",
    ]
    if not issues:
        lines.append(POSITIVE_SUMMARY)
    else:
        lines.extend(FLAKINESS_SUMMARY)
    return "\n".join(lines)


class RaceConditionChecker:
    key = "raceConditionAnalysis"
    framework = Framework.CYPRESS
    description = (
        "Detects flaky wait patterns (cy.wait, .wait('@')) and async actions "
        "missing follow-up assertions."
    )

    def analyze(self, source: CheckerInput) -> CheckerOutput:
        parsed = source.parsed()
        ctx = AnalysisContext(parsed=parsed, content=source.content)

        collect_aliases(ctx)
        ctx.assertion_lines = find_assertion_lines(ctx.root)
        ctx.action_sites = find_action_sites(parsed)

        check_waits(ctx)
        check_actions(ctx)
        check_chains(ctx)

        issues = tuple(ctx.issues)
        blocks = find_test_blocks(ctx.root)
        numeric_score = calculate_score(
            issues, len(blocks), map_issues_to_test_blocks(issues, blocks)
        )
        file_score = grade_score(numeric_score)
        logger.debug(
            "%s: %d issue(s) across %d test(s), score %s",
            source.path, len(issues), len(blocks), numeric_score,
        )
        return CheckerOutput(
            checker_name=self.key,
            file_path=source.path,
            issues=issues,
            file_score=file_score,
            numeric_score=numeric_score,
            plain_summary=self.build_summary(issues, file_score, numeric_score),
        )

    def build_summary(
        self, issues: Sequence[Issue], file_score: Grade, numeric_score: float | None
    ) -> str:
        return reliability_summary(issues, file_score, numeric_score)


__all__ = ["RaceConditionChecker", "reliability_summary"]

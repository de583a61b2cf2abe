"""Playwright checker: fixed ``page.waitForTimeout(ms)`` pauses."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from testcopilot.checkers.base import CheckerInput
from testcopilot.checkers.context import AnalysisContext
from testcopilot.engine.predicates import has_explanatory_comment, is_exempt_hard_wait
from testcopilot.engine.queries import find_test_blocks, iter_calls, map_issues_to_test_blocks
from testcopilot.engine.treesitter._nodes import (
    call_arguments,
    is_member_call_on,
    number_value,
    start_line,
)
from testcopilot.enums import Framework, Grade, Severity
from testcopilot.models import CheckerOutput, Issue
from testcopilot.scoring import calculate_score, format_score, grade_score

logger = logging.getLogger(__name__)

PAGE_IDENTIFIER = "page"
PLAYWRIGHT_TEST_NAMES = ("test", "it")
HARD_WAIT_MIN_MS = 500


def _check_timeouts(ctx: AnalysisContext) -> None:
    for call in iter_calls(ctx.root):
        if not is_member_call_on(call, PAGE_IDENTIFIER, "waitForTimeout"):
            continue
        args = call_arguments(call)
        if not args:
            continue
        delay = number_value(args[0])
        if delay is None or delay < HARD_WAIT_MIN_MS:
            continue
        text = ctx.line_text(start_line(call))
        if is_exempt_hard_wait(text, delay):
            continue
        fix = (
            "Wait for the element state instead, e.g. await expect(locator).toBeVisible()."
            if has_explanatory_comment(text)
            else "Replace with a web-first assertion like await expect(locator).toBeVisible() "
            "or page.waitForResponse() for a specific network call. Or add "
            "'// testcopilot-disable' to suppress this warning if the wait is intentional."
        )
        ctx.report(
            f"page.waitForTimeout({delay}) pauses for a fixed {delay}ms — fixed waits "
            "make Playwright tests flaky.",
            Severity.HIGH,
            ctx.location_of(call),
            plain_explanation=(
                "A fixed timeout ignores what the page is doing. If the app is slower "
                "than the pause the test fails; if it is faster the test just wastes time."
            ),
            fix=fix,
        )


class PlaywrightHardWaitChecker:
    key = "playwrightHardWaits"
    framework = Framework.PLAYWRIGHT
    description = "Detects fixed page.waitForTimeout() pauses in Playwright tests."

    def analyze(self, source: CheckerInput) -> CheckerOutput:
        ctx = AnalysisContext(parsed=source.parsed(), content=source.content)
        _check_timeouts(ctx)

        issues = tuple(ctx.issues)
        blocks = find_test_blocks(ctx.root, PLAYWRIGHT_TEST_NAMES)
        numeric_score = calculate_score(
            issues, len(blocks), map_issues_to_test_blocks(issues, blocks)
        )
        file_score = grade_score(numeric_score)
        logger.debug("%s: %d fixed timeout(s), score %s", source.path, len(issues), numeric_score)
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
        lines = [
            f"This Playwright test file was rated {file_score} for wait reliability "
            f"(score: {format_score(numeric_score)}).",
            "",
        ]
        if not issues:
            lines.append("✅ It waits on page state rather than fixed timeouts.")
        else:
            lines.append(
                f"⚠️ It pauses for fixed timeouts {len(issues)} time(s). Prefer web-first "
                "assertions, which retry until the page is ready."
            )
        return "\n".join(lines)


__all__ = ["PlaywrightHardWaitChecker"]

"""User actions (``click``, ``type``...) that nothing verifies afterwards."""

from __future__ import annotations

from testcopilot.checkers.context import AnalysisContext
from testcopilot.engine.predicates import has_related_assertion, is_likely_valid_without_assertion
from testcopilot.enums import Severity
from testcopilot.models import ActionSite

FOLLOW_UP_WINDOW = 10


def _has_follow_up(ctx: AnalysisContext, site: ActionSite) -> bool:
    line = site.line
    if any(line < a <= line + FOLLOW_UP_WINDOW for a in ctx.assertion_lines):
        return True
    if site.selector and has_related_assertion(ctx.root, site.selector, line):
        return True
    return is_likely_valid_without_assertion(site.command, site.selector, ctx.lines, line)


def check_actions(ctx: AnalysisContext) -> None:
    for site in ctx.action_sites:
        if site.has_chained_assertion or _has_follow_up(ctx, site):
            continue
        verb = site.command
        ctx.report(
            f'User action "cy.{verb}()" is not followed by a check to confirm the app responded.',
            Severity.MEDIUM,
            site.location,
            plain_explanation=(
                f'The test simulates a user interaction using "cy.{verb}()", but it '
                "doesn't verify whether the app responded correctly. Without a follow-up "
                "check, the test might pass even if the application fails to react — "
                "leading to false confidence in test results."
            ),
            fix=(
                f'After calling "cy.{verb}()", add a UI assertion such as '
                '"cy.get(...).should(...)" to confirm the expected change happened. '
                "This helps ensure the app responded as intended."
            ),
        )

"""Alias collection and ``cy.wait(...)`` classification."""

from __future__ import annotations

import logging
import re

from testcopilot.checkers.context import AnalysisContext
from testcopilot.engine.predicates import (
    alias_wait_value,
    has_consecutive_waits,
    has_explanatory_comment,
    is_exempt_hard_wait,
    is_part_of_retry_mechanism,
)
from testcopilot.engine.queries import ROOT_IDENTIFIER, iter_calls
from testcopilot.engine.treesitter._nodes import (
    call_arguments,
    is_member_call_on,
    method_name,
    number_value,
    start_line,
    string_value,
)
from testcopilot.enums import Severity

logger = logging.getLogger(__name__)

HARD_WAIT_MIN_MS = 500

BACKGROUND_ALIAS_RE = re.compile(r"(?:analytic|track|log|beacon|metric|stat)", re.IGNORECASE)

HARD_WAIT_EXPLANATION = (
    "Using fixed delays like this can cause flakiness. If the app responds faster "
    "or slower than expected, the test may pass or fail unpredictably."
)
HARD_WAIT_FIX_COMMENTED = (
    "Consider using cy.get(...).should(...) to wait for the animation/element "
    "state instead of a fixed delay."
)
HARD_WAIT_FIX = (
    "Replace with a condition-based wait like cy.get(...).should(...) or use "
    "cy.intercept() to wait for a specific network call. Or add "
    "'// testcopilot-disable' to suppress this warning if the wait is intentional."
)


def collect_aliases(ctx: AnalysisContext) -> None:
    """Every ``<anything>.as('name')`` in the file declares ``@name``.

    Covers ``cy.intercept(...).as()`` and the legacy ``cy.route(...).as()``
    alike, wherever they sit relative to the waits.
    """
    for call in iter_calls(ctx.root):
        if method_name(call) != "as":
            continue
        args = call_arguments(call)
        if len(args) != 1:
            continue
        name = string_value(args[0])
        if name is not None:
            ctx.aliases.add(f"@{name}")
    logger.debug("collected %d alias(es)", len(ctx.aliases))


def _check_hard_wait(ctx: AnalysisContext, call, delay) -> None:
    line = start_line(call)
    text = ctx.line_text(line)
    if is_exempt_hard_wait(text, delay):
        return
    if is_part_of_retry_mechanism(call):
        return
    explained = has_explanatory_comment(text)
    ctx.report(
        f"Hardcoded delay of {delay}ms — using fixed waits causes flakiness and unreliable tests.",
        Severity.HIGH,
        ctx.location_of(call),
        plain_explanation=HARD_WAIT_EXPLANATION,
        fix=HARD_WAIT_FIX_COMMENTED if explained else HARD_WAIT_FIX,
    )


def _check_alias_wait(ctx: AnalysisContext, call, alias: str) -> None:
    if alias not in ctx.aliases:
        ctx.report(
            f"cy.wait('{alias}') used without cy.intercept() — this wait is fragile "
            "and may break if the request doesn't fire.",
            Severity.HIGH,
            ctx.location_of(call),
            plain_explanation=(
                "Waiting on an alias that isn't defined with cy.intercept() makes your "
                "test fragile. If the request never happens, the test may hang or fail "
                "unpredictably."
            ),
            fix=(
                "Add cy.intercept(...) before this line to declare the alias properly, "
                "or switch to a UI-based wait like cy.get(...).should(...)."
            ),
        )
        return

    if BACKGROUND_ALIAS_RE.search(alias):
        return
    if has_consecutive_waits(ctx.root, start_line(call)):
        return
    ctx.report(
        f"cy.wait('{alias}') used — alias is defined, but should be followed by a UI "
        "assertion to confirm the app reacted as expected.",
        Severity.MEDIUM,
        ctx.location_of(call),
        plain_explanation=(
            "This wait relies on a declared alias, which helps, but doesn't confirm "
            "the app actually responded correctly."
        ),
        fix=(
            "Add a UI assertion after this wait to verify the app reacted correctly "
            "— e.g. cy.get(...).should(...)."
        ),
    )


def check_waits(ctx: AnalysisContext) -> None:
    """Flag hard waits and alias waits, in source order."""
    for call in iter_calls(ctx.root):
        if not is_member_call_on(call, ROOT_IDENTIFIER, "wait"):
            continue
        args = call_arguments(call)
        if len(args) != 1:
            continue
        delay = number_value(args[0])
        if delay is not None:
            if delay >= HARD_WAIT_MIN_MS:
                _check_hard_wait(ctx, call, delay)
            continue
        alias = alias_wait_value(call)
        if alias is not None:
            _check_alias_wait(ctx, call, alias)

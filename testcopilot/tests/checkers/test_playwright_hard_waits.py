"""Tests for the Playwright fixed-timeout checker."""

from __future__ import annotations

import pytest

from testcopilot.checkers.base import CheckerInput
from testcopilot.checkers.playwright.hard_waits import PlaywrightHardWaitChecker
from testcopilot.engine.treesitter import is_available
from testcopilot.enums import Grade, Severity

pytestmark = pytest.mark.skipif(
    not is_available(), reason="tree-sitter-language-pack not installed"
)


def _analyze(source: str, path: str = "tests/e2e/login.spec.ts"):
    return PlaywrightHardWaitChecker().analyze(CheckerInput(path=path, content=source))


def test_long_timeout_is_flagged():
    output = _analyze(
        "test('logs in', async ({ page }) => {\n"
        "  await page.goto('/');\n"
        "  await page.waitForTimeout(2000);\n"
        "});\n"
    )
    (issue,) = output.issues
    assert issue.severity == Severity.HIGH
    assert issue.message.startswith("page.waitForTimeout(2000) pauses for a fixed 2000ms")
    assert issue.location.line == 3
    assert issue.context_code == "await page.waitForTimeout(2000);"
    assert output.checker_name == "playwrightHardWaits"
    assert output.numeric_score == 24.0
    assert output.file_score == Grade.HIGH_RISK


def test_short_timeout_is_ignored():
    output = _analyze(
        "test('x', async ({ page }) => {\n  await page.waitForTimeout(300);\n});\n"
    )
    assert output.issues == ()
    assert output.numeric_score == 100.0


def test_disable_marker():
    output = _analyze(
        "test('x', async ({ page }) => {\n"
        "  await page.waitForTimeout(3000); // testcopilot-disable\n"
        "});\n"
    )
    assert output.issues == ()


def test_explained_long_timeout_gets_element_state_fix():
    output = _analyze(
        "test('x', async ({ page }) => {\n"
        "  await page.waitForTimeout(1500); // let the animation settle\n"
        "});\n"
    )
    (issue,) = output.issues
    assert issue.fix.startswith("Wait for the element state instead")


def test_other_receivers_are_ignored():
    output = _analyze(
        "test('x', async ({ page }) => {\n"
        "  const frame = page.mainFrame();\n"
        "  await frame.waitForTimeout(2000);\n"
        "});\n"
    )
    assert output.issues == ()


def test_summary_counts_timeouts():
    output = _analyze(
        "test('a', async ({ page }) => {\n"
        "  await page.waitForTimeout(1000);\n"
        "});\n"
        "test('b', async ({ page }) => {\n"
        "  await page.waitForTimeout(1000);\n"
        "});\n"
    )
    lines = output.plain_summary.splitlines()
    assert lines[0].startswith("This Playwright test file was rated E - High Risk")
    assert "2 time(s)" in lines[2]


def test_clean_summary():
    output = _analyze(
        "test('x', async ({ page }) => {\n  await expect(page.locator('h1')).toBeVisible();\n});\n"
    )
    assert output.plain_summary.endswith("✅ It waits on page state rather than fixed timeouts.")

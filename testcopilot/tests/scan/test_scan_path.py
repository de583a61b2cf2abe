"""Tests for file discovery and the scan pipeline."""

from __future__ import annotations

import pytest

from testcopilot.engine.treesitter import is_available
from testcopilot.scan import analyze_file, scan_path
from testcopilot.utils import find_test_files, is_test_file, matches_exclusion

needs_parser = pytest.mark.skipif(
    not is_available(), reason="tree-sitter-language-pack not installed"
)

CLEAN = "it('x', () => {\n  cy.get('h1').should('exist');\n});\n"
HARD_WAIT = "it('x', () => {\n  cy.wait(1000);\n});\n"
BROKEN = "it('x', () => {\n  cy.wait(1000)\n"


def _write(root, relpath: str, content: str = CLEAN):
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestIsTestFile:
    def test_name_markers(self):
        assert is_test_file("src/login.cy.js")
        assert is_test_file("src/login.spec.ts")
        assert is_test_file("src/login.test.tsx")

    def test_e2e_directories(self):
        assert is_test_file("cypress/e2e/login.js")
        assert is_test_file("playwright/login.ts")

    def test_other_files(self):
        assert not is_test_file("src/login.js")
        assert not is_test_file("cypress/e2e/users.json")


class TestMatchesExclusion:
    def test_component_match(self):
        assert matches_exclusion("cypress/fixtures/a.cy.js", "fixtures")
        assert not matches_exclusion("fixturesTool.cy.js", "fixtures")

    def test_path_prefix(self):
        assert matches_exclusion("cypress/support/a.cy.js", "cypress/support")
        assert not matches_exclusion("cypress/e2e/a.cy.js", "cypress/support")


class TestFindTestFiles:
    def test_sorted_and_filtered(self, tmp_path):
        _write(tmp_path, "cypress/e2e/b.cy.js")
        _write(tmp_path, "cypress/e2e/a.cy.js")
        _write(tmp_path, "src/app.js")
        _write(tmp_path, "node_modules/lib/x.cy.js")
        found = find_test_files(tmp_path)
        assert [p.rsplit("/", 1)[-1] for p in found] == ["a.cy.js", "b.cy.js"]

    def test_configured_exclusions(self, tmp_path):
        _write(tmp_path, "cypress/e2e/a.cy.js")
        _write(tmp_path, "cypress/legacy/old.cy.js")
        found = find_test_files(tmp_path, ["legacy"])
        assert len(found) == 1
        assert found[0].endswith("a.cy.js")

    def test_single_file(self, tmp_path):
        path = _write(tmp_path, "notes.js")
        assert find_test_files(path) == [str(path)]


@needs_parser
class TestAnalyzeFile:
    def test_runs_framework_checkers(self):
        (output,) = analyze_file("cypress/e2e/a.cy.js", HARD_WAIT)
        assert output.checker_name == "raceConditionAnalysis"
        assert len(output.issues) == 1

    def test_unknown_framework(self):
        assert analyze_file("src/a.test.js", "expect(1).toBe(1);\n") == []

    def test_disabled_checker(self):
        config = {"checkers": {"raceConditionAnalysis": False}}
        assert analyze_file("cypress/e2e/a.cy.js", HARD_WAIT, config) == []


@needs_parser
class TestScanPath:
    def test_aggregates_files(self, tmp_path):
        _write(tmp_path, "cypress/e2e/a.cy.js", CLEAN)
        _write(tmp_path, "cypress/e2e/b.cy.js", HARD_WAIT)
        result = scan_path(tmp_path)
        assert result.ok
        assert result.files_found == 2
        assert result.summary.files_analyzed == 2
        assert result.summary.total_issues == 1
        assert result.summary.overall_score == 62.0

    def test_parse_failure_is_recorded_and_scan_continues(self, tmp_path):
        _write(tmp_path, "cypress/e2e/a.cy.js", CLEAN)
        _write(tmp_path, "cypress/e2e/broken.cy.js", BROKEN)
        result = scan_path(tmp_path)
        assert not result.ok
        (failure,) = result.failures
        assert failure.file_path.endswith("broken.cy.js")
        assert len(result.file_results) == 1

    def test_files_without_a_framework_are_skipped(self, tmp_path):
        _write(tmp_path, "unit/math.test.js", "expect(1).toBe(1);\n")
        result = scan_path(tmp_path)
        assert result.ok
        assert len(result.skipped) == 1
        assert result.summary.files_analyzed == 0
        assert result.summary.overall_score == 100.0

    def test_exclude_from_config(self, tmp_path):
        _write(tmp_path, "cypress/e2e/a.cy.js", CLEAN)
        _write(tmp_path, "cypress/e2e/legacy/b.cy.js", HARD_WAIT)
        result = scan_path(tmp_path, {"exclude": ["legacy"]})
        assert result.files_found == 1
        assert result.summary.total_issues == 0

    def test_to_dict(self, tmp_path):
        _write(tmp_path, "cypress/e2e/a.cy.js", HARD_WAIT)
        payload = scan_path(tmp_path).to_dict()
        assert payload["files_found"] == 1
        assert payload["skipped"] == []
        assert payload["file_results"][0]["numeric_score"] == 24.0

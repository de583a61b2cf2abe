"""Tests for tree queries: test blocks, assertion lines, action sites."""

from __future__ import annotations

import pytest

from testcopilot.engine.queries import (
    find_action_sites,
    find_assertion_lines,
    find_test_blocks,
    map_issues_to_test_blocks,
)
from testcopilot.engine.treesitter import is_available, parse_source
from testcopilot.enums import Severity
from testcopilot.models import Issue, Location, TestBlock

needs_parser = pytest.mark.skipif(
    not is_available(), reason="tree-sitter-language-pack not installed"
)


def _parse(source: str):
    return parse_source(source, "spec.cy.js")


@needs_parser
class TestFindTestBlocks:
    def test_block_bodies_in_source_order(self):
        parsed = _parse(
            "describe('s', () => {\n"
            "  it('a', () => {\n"
            "    cy.visit('/');\n"
            "  });\n"
            "  it('b', function () {\n"
            "    cy.visit('/b');\n"
            "  });\n"
            "  it('c', () => cy.visit('/c'));\n"
            "  it.skip('d', () => {});\n"
            "});\n"
        )
        blocks = find_test_blocks(parsed.root)
        assert blocks == [
            TestBlock(index=0, start_line=2, end_line=4),
            TestBlock(index=1, start_line=5, end_line=7),
        ]

    def test_custom_test_names(self):
        parsed = _parse("test('a', async () => {\n  await page.goto('/');\n});\n")
        assert find_test_blocks(parsed.root) == []
        assert len(find_test_blocks(parsed.root, ("test",))) == 1


@needs_parser
class TestFindAssertionLines:
    def test_member_direct_and_then_callback_assertions(self):
        parsed = _parse(
            "it('a', () => {\n"
            "  cy.get('#a').should('be.visible');\n"
            "  expect(true).to.equal(true);\n"
            "  cy.get('#b').then(($el) => {\n"
            "    expect($el).to.exist;\n"
            "  });\n"
            "  cy.visit('/');\n"
            "});\n"
        )
        assert find_assertion_lines(parsed.root) == {2, 3, 5}

    def test_multiline_chain_counts_at_chain_start(self):
        parsed = _parse("cy.get('#a')\n  .find('li')\n  .and('have.length', 3);\n")
        assert find_assertion_lines(parsed.root) == {1}

    def test_no_assertions(self):
        assert find_assertion_lines(_parse("cy.visit('/');\n").root) == set()


@needs_parser
class TestFindActionSites:
    def test_actions_rooted_at_cy(self):
        parsed = _parse(
            "cy.get('#a').click();\n"
            "cy.get('#b').type('x').should('have.value', 'x');\n"
            "cy.contains('Save').click();\n"
            "page.click('#c');\n"
            "$el.click();\n"
        )
        sites = find_action_sites(parsed)
        assert [(s.line, s.command) for s in sites] == [(1, "click"), (2, "type"), (3, "click")]
        assert [s.has_chained_assertion for s in sites] == [False, True, False]
        assert [s.selector for s in sites] == ["#a", "#b", None]

    def test_location_spans_chain_root_to_action(self):
        parsed = _parse("  cy.get('#a')\n    .click();\n")
        (site,) = find_action_sites(parsed)
        assert site.location.line == 1
        assert site.location.column == 2
        assert site.location.end_line == 2

    def test_non_action_methods_are_ignored(self):
        parsed = _parse("cy.get('#a').invoke('text');\ncy.visit('/');\n")
        assert find_action_sites(parsed) == []

    def test_then_callback_actions_are_still_found(self):
        parsed = _parse("cy.get('#a').then(() => {\n  cy.get('#b').click();\n});\n")
        assert [s.line for s in find_action_sites(parsed)] == [2]


class TestMapIssuesToTestBlocks:
    def _issue(self, line: int | None) -> Issue:
        location = Location(line=line) if line is not None else None
        return Issue(message="m", severity=Severity.MEDIUM, location=location)

    def test_first_matching_block_wins(self):
        blocks = [TestBlock(0, 2, 5), TestBlock(1, 7, 9)]
        a, b, c = self._issue(3), self._issue(8), self._issue(9)
        assert map_issues_to_test_blocks([a, b, c], blocks) == {0: [a], 1: [b, c]}

    def test_issues_outside_blocks_or_without_location_are_dropped(self):
        blocks = [TestBlock(0, 2, 5)]
        issues = [self._issue(1), self._issue(None), self._issue(6)]
        assert map_issues_to_test_blocks(issues, blocks) == {}

    def test_block_boundaries_are_inclusive(self):
        blocks = [TestBlock(0, 2, 5)]
        start, end = self._issue(2), self._issue(5)
        assert map_issues_to_test_blocks([start, end], blocks) == {0: [start, end]}

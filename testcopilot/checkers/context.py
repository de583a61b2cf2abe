"""Per-file analysis state shared by a checker's passes."""

from __future__ import annotations

from dataclasses import dataclass, field

from testcopilot.engine.treesitter import ParsedTree
from testcopilot.enums import Severity
from testcopilot.models import ActionSite, Issue, Location


@dataclass
class AnalysisContext:
    """Created fresh for each file and discarded once its issues are collected."""

    parsed: ParsedTree
    content: str
    lines: list[str] = field(default_factory=list)
    aliases: set[str] = field(default_factory=set)
    assertion_lines: set[int] = field(default_factory=set)
    action_sites: list[ActionSite] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.lines:
            self.lines = self.content.split("\n")

    @property
    def root(self):
        return self.parsed.root

    def line_text(self, line: int | None) -> str:
        """Raw text of a 1-indexed line; empty when out of range."""
        if line is None or not 1 <= line <= len(self.lines):
            return ""
        return self.lines[line - 1]

    def context_code(self, line: int | None) -> str | None:
        if line is None or not 1 <= line <= len(self.lines):
            return None
        return self.lines[line - 1].strip()

    def location_of(self, start_node, end_node=None) -> Location | None:
        try:
            return self.parsed.location(start_node, end_node)
        except (AttributeError, IndexError, TypeError):
            return None

    def report(
        self,
        message: str,
        severity: Severity,
        location: Location | None,
        *,
        context_line: int | None = None,
        plain_explanation: str | None = None,
        fix: str | None = None,
    ) -> Issue:
        """Record an issue. Without a location the issue carries no context line either."""
        if location is not None and not 1 <= location.line <= len(self.lines):
            location = None
        context = None
        if location is not None:
            context = self.context_code(context_line if context_line is not None else location.line)
        issue = Issue(
            message=message,
            severity=severity,
            location=location,
            context_code=context,
            plain_explanation=plain_explanation,
            fix=fix,
        )
        self.issues.append(issue)
        return issue


__all__ = ["AnalysisContext"]

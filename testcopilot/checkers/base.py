"""Checker contract: what every framework checker exposes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from testcopilot.engine.treesitter import ParsedTree, parse_source
from testcopilot.enums import Framework, Grade
from testcopilot.models import CheckerOutput, Issue


@dataclass(frozen=True)
class CheckerInput:
    """One file handed to a checker; *tree* is reused when already parsed."""

    path: str
    content: str
    tree: ParsedTree | None = None

    def parsed(self) -> ParsedTree:
        if self.tree is not None:
            return self.tree
        return parse_source(self.content, self.path)


class Checker(Protocol):
    key: str
    framework: Framework
    description: str

    def analyze(self, source: CheckerInput) -> CheckerOutput:
        """Analyse one file. Raises ParseError for malformed input."""
        ...

    def build_summary(
        self, issues: Sequence[Issue], file_score: Grade, numeric_score: float | None
    ) -> str:
        ...


__all__ = ["Checker", "CheckerInput"]

"""Result types shared by checkers, scoring, aggregation and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from testcopilot.enums import Grade, Severity


@dataclass(frozen=True)
class Location:
    line: int
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None

    def to_dict(self) -> dict[str, int]:
        out = {"line": self.line}
        if self.column is not None:
            out["column"] = self.column
        if self.end_line is not None:
            out["end_line"] = self.end_line
        if self.end_column is not None:
            out["end_column"] = self.end_column
        return out


@dataclass(frozen=True)
class Issue:
    """One reliability problem found in a test file."""

    message: str
    severity: Severity
    location: Location | None = None
    context_code: str | None = None  # trimmed source line at location.line
    plain_explanation: str | None = None
    fix: str | None = None

    @property
    def line(self) -> int | None:
        return self.location.line if self.location is not None else None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "message": self.message,
            "severity": str(self.severity),
        }
        if self.location is not None:
            out["location"] = self.location.to_dict()
        if self.context_code is not None:
            out["context_code"] = self.context_code
        if self.plain_explanation is not None:
            out["plain_explanation"] = self.plain_explanation
        if self.fix is not None:
            out["fix"] = self.fix
        return out


@dataclass(frozen=True)
class TestBlock:
    """Line span of one ``it(...)`` body."""

    __test__ = False  # not a pytest class

    index: int
    start_line: int
    end_line: int

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True)
class ActionSite:
    """A user-action command (``click``, ``type``...) rooted at the library object."""

    line: int
    command: str
    has_chained_assertion: bool
    selector: str | None = None
    location: Location | None = None


@dataclass(frozen=True)
class CheckerOutput:
    checker_name: str
    file_path: str
    issues: tuple[Issue, ...]
    file_score: Grade
    numeric_score: float | None
    plain_summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "checker_name": self.checker_name,
            "file_path": self.file_path,
            "issues": [issue.to_dict() for issue in self.issues],
            "file_score": str(self.file_score),
            "numeric_score": self.numeric_score,
            "plain_summary": self.plain_summary,
        }


@dataclass(frozen=True)
class FileFailure:
    """A file that could not be analysed at all (unreadable or unparseable)."""

    file_path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"file_path": self.file_path, "reason": self.reason}


@dataclass(frozen=True)
class CodebaseSummary:
    overall_score: float
    overall_grade: Grade
    file_results: tuple[CheckerOutput, ...]
    total_issues: int
    files_analyzed: int
    per_checker_breakdown: dict[str, dict[str, int]]
    plain_summary: str
    failures: tuple[FileFailure, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "overall_grade": str(self.overall_grade),
            "total_issues": self.total_issues,
            "files_analyzed": self.files_analyzed,
            "per_checker_breakdown": self.per_checker_breakdown,
            "plain_summary": self.plain_summary,
            "file_results": [result.to_dict() for result in self.file_results],
            "failures": [failure.to_dict() for failure in self.failures],
        }


__all__ = [
    "ActionSite",
    "CheckerOutput",
    "CodebaseSummary",
    "FileFailure",
    "Issue",
    "Location",
    "TestBlock",
]

"""Canonical enums for issue and checker attributes.

StrEnum values compare equal to their string values (Severity.HIGH == "high"),
so JSON payloads and plain-string callers keep working.
"""

from __future__ import annotations

import enum


class Severity(enum.StrEnum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very high"


class Grade(enum.StrEnum):
    EXCELLENT = "A - Excellent"
    GOOD = "B - Good"
    FAIR = "C - Fair"
    MODERATE_RISK = "D - Moderate Risk"
    HIGH_RISK = "E - High Risk"


class Framework(enum.StrEnum):
    CYPRESS = "cypress"
    PLAYWRIGHT = "playwright"
    SHARED = "shared"

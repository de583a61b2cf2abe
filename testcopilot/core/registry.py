"""Framework detection and the framework -> checkers table."""

from __future__ import annotations

import re
from collections.abc import Mapping

from testcopilot.checkers.base import Checker
from testcopilot.checkers.cypress.race_conditions import RaceConditionChecker
from testcopilot.checkers.playwright.hard_waits import PlaywrightHardWaitChecker
from testcopilot.enums import Framework

_CYPRESS_CONTENT_RE = re.compile(r"cy\.")
_PLAYWRIGHT_CONTENT_RE = re.compile(r"page\.")

# Order within a framework is the order checkers run and report in.
REGISTERED_CHECKERS: dict[str, list[Checker]] = {
    Framework.CYPRESS: [RaceConditionChecker()],
    Framework.PLAYWRIGHT: [PlaywrightHardWaitChecker()],
}


def detect_framework(path: str, content: str) -> Framework | None:
    """Path hint first, then a content sniff. Cypress wins ties."""
    lowered = path.lower()
    if "cypress" in lowered or _CYPRESS_CONTENT_RE.search(content):
        return Framework.CYPRESS
    if "playwright" in lowered or _PLAYWRIGHT_CONTENT_RE.search(content):
        return Framework.PLAYWRIGHT
    return None


def checker_enabled(checker: Checker, config: Mapping | None) -> bool:
    if not config:
        return True
    return bool((config.get("checkers") or {}).get(checker.key, True))


def checkers_for(framework: str | None, config: Mapping | None = None) -> list[Checker]:
    """Enabled checkers for *framework*, in registration order; unknown -> []."""
    if framework is None:
        return []
    return [c for c in REGISTERED_CHECKERS.get(framework, []) if checker_enabled(c, config)]


def all_checkers() -> list[Checker]:
    seen: dict[str, Checker] = {}
    for checkers in REGISTERED_CHECKERS.values():
        for checker in checkers:
            seen.setdefault(checker.key, checker)
    return list(seen.values())


__all__ = [
    "REGISTERED_CHECKERS",
    "all_checkers",
    "checker_enabled",
    "checkers_for",
    "detect_framework",
]

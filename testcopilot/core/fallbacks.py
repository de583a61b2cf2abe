"""stderr reporting for problems that should not stop a scan."""

from __future__ import annotations

import logging
import sys

from testcopilot.utils import colorize

ERROR_PREFIX = "testcopilot: error:"
WARNING_PREFIX = "testcopilot: warning:"


def log_best_effort_failure(
    logger: logging.Logger, action: str, exc: Exception
) -> None:
    """Debug record for a step that failed and was skipped (config read, scorecard write)."""
    logger.debug("skipped: could not %s (%s: %s)", action, type(exc).__name__, exc)


def print_error(message: str) -> None:
    print(colorize(f"  {ERROR_PREFIX} {message}", "red"), file=sys.stderr)


def warn_best_effort(message: str) -> None:
    """Tell the user a step fell back to defaults; the scan carries on."""
    print(colorize(f"  {WARNING_PREFIX} {message}", "yellow"), file=sys.stderr)


__all__ = [
    "ERROR_PREFIX",
    "WARNING_PREFIX",
    "log_best_effort_failure",
    "print_error",
    "warn_best_effort",
]

"""checkers command: list registered checkers."""

from __future__ import annotations

from testcopilot.core.registry import all_checkers, checker_enabled
from testcopilot.utils import colorize, print_table


def cmd_checkers(args) -> int:
    config = getattr(args, "_config", None)
    rows = [
        [
            checker.key,
            str(checker.framework),
            "yes" if checker_enabled(checker, config) else "no",
            checker.description,
        ]
        for checker in all_checkers()
    ]
    print(colorize("\n  Registered checkers\n", "bold"))
    print_table(["Key", "Framework", "Enabled", "Description"], rows)
    print()
    return 0

"""CLI entry point: argparse, subcommand routing."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from testcopilot.core.config import CONFIG_FILE, load_config

USAGE_EXAMPLES = """
examples:
  testcopilot scan                                  Scan the current directory
  testcopilot scan cypress/e2e --explain            Include why + how-to-fix per issue
  testcopilot scan tests/login.cy.ts --json         Machine-readable output
  testcopilot scan --scorecard report.png           Also render a PNG scorecard
  testcopilot scan --exclude fixtures support       Skip directories
  testcopilot checkers                              List checkers and whether they run
  testcopilot config set checkers.raceConditionAnalysis false
"""


def create_parser() -> argparse.ArgumentParser:
    from testcopilot.commands.scan import SCORECARD_DEFAULT

    parser = argparse.ArgumentParser(
        prog="testcopilot",
        description="TestCopilot — static reliability checks for e2e test files",
        epilog=USAGE_EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None, metavar="FILE",
                        help=f"Config file (default: ./{CONFIG_FILE.name})")
    sub = parser.add_subparsers(dest="command", required=True)

    p_scan = sub.add_parser("scan", help="Analyse test files and report reliability issues")
    p_scan.add_argument("path", nargs="?", default=None,
                        help="Test file or directory (default: current directory)")
    p_scan.add_argument("--json", action="store_true", help="Print results as JSON")
    p_scan.add_argument("--explain", action="store_true",
                        help="Show the plain-language explanation and fix for each issue")
    p_scan.add_argument("--no-file-summary", action="store_true",
                        help="Omit the per-file summary paragraph")
    p_scan.add_argument("--no-codebase", action="store_true",
                        help="Omit the codebase roll-up")
    p_scan.add_argument("--scorecard", nargs="?", const=SCORECARD_DEFAULT, default=None,
                        metavar="FILE", help="Write a PNG scorecard (needs Pillow)")
    p_scan.add_argument("--exclude", nargs="+", metavar="PATTERN",
                        help="Path patterns to exclude (e.g. --exclude fixtures support)")

    sub.add_parser("checkers", help="List registered checkers")

    p_config = sub.add_parser("config", help="Show or change configuration")
    config_sub = p_config.add_subparsers(dest="config_action")
    config_sub.add_parser("show", help="Show all config values")
    p_set = config_sub.add_parser("set", help="Set a config value")
    p_set.add_argument("config_key", help="Config key (checkers.<key> toggles one checker)")
    p_set.add_argument("config_value", help="New value")
    p_unset = config_sub.add_parser("unset", help="Reset a config key to its default")
    p_unset.add_argument("config_key", help="Config key")

    return parser


def _command_handlers() -> dict:
    # Lazy-load command handlers from commands/
    from testcopilot.commands.checkers_cmd import cmd_checkers
    from testcopilot.commands.config_cmd import cmd_config
    from testcopilot.commands.scan import cmd_scan

    return {
        "scan": cmd_scan,
        "checkers": cmd_checkers,
        "config": cmd_config,
    }


def main(argv: list[str] | None = None) -> int:
    if os.environ.get("TESTCOPILOT_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    parser = create_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config) if args.config else CONFIG_FILE
    args._config_path = config_path
    args._config = load_config(config_path)

    try:
        code = _command_handlers()[args.command](args)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        code = 1
    return code or 0


if __name__ == "__main__":
    sys.exit(main())

"""scan command: analyse test files and report reliability issues."""

from __future__ import annotations

import logging
from pathlib import Path

from testcopilot.core.config import merge_cli_overrides
from testcopilot.core.fallbacks import log_best_effort_failure, print_error, warn_best_effort
from testcopilot.engine.treesitter import is_available
from testcopilot.output.console import render_json, render_scan
from testcopilot.scan import scan_path
from testcopilot.utils import log, rel

logger = logging.getLogger(__name__)

# --scorecard given without a value
SCORECARD_DEFAULT = "__config__"


def _overrides_from_args(args) -> dict:
    overrides: dict = {
        "issue_explain": True if getattr(args, "explain", False) else None,
        "file_summary": False if getattr(args, "no_file_summary", False) else None,
        "codebase_analysis": False if getattr(args, "no_codebase", False) else None,
        "exclude": list(args.exclude) if getattr(args, "exclude", None) else None,
    }
    scorecard = getattr(args, "scorecard", None)
    if getattr(args, "json", False):
        overrides["output_format"] = "both" if scorecard else "json"
    elif scorecard:
        overrides["output_format"] = "scorecard"
    if scorecard and scorecard != SCORECARD_DEFAULT:
        overrides["scorecard_path"] = scorecard
    return overrides


def _write_scorecard(result, path: str) -> None:
    try:
        from testcopilot.output.scorecard import generate_scorecard

        written = generate_scorecard(result.summary, path)
    except ImportError as exc:
        log_best_effort_failure(logger, "import Pillow for the scorecard", exc)
        warn_best_effort("Scorecard skipped: install the 'scorecard' extra (Pillow).")
        return
    except OSError as exc:
        log_best_effort_failure(logger, f"write scorecard to {path}", exc)
        warn_best_effort(f"Could not write scorecard to {path}: {exc}")
        return
    log(f"  Scorecard saved to {rel(str(written))}")


def cmd_scan(args) -> int:
    """Scan a file or directory. Returns 1 when any file failed to parse or read."""
    if not is_available():
        print_error("tree-sitter-language-pack is not installed; cannot parse test files.")
        return 1

    config = merge_cli_overrides(args._config, _overrides_from_args(args))
    path = getattr(args, "path", None) or "."
    if not Path(path).exists():
        print_error(f"Path not found: {path}")
        return 1
    log(f"  Scanning {path} ...")
    result = scan_path(path, config)

    output_format = config.get("output_format", "console")
    if output_format in ("json", "both"):
        render_json(result)
    else:
        render_scan(
            result,
            explain=config.get("issue_explain", False),
            file_summary=config.get("file_summary", True),
            codebase=config.get("codebase_analysis", True),
        )
    if output_format in ("scorecard", "both"):
        _write_scorecard(result, config.get("scorecard_path") or "testcopilot-scorecard.png")

    return 0 if result.ok else 1

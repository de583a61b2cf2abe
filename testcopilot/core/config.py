"""Project config (testcopilot.config.json in the working directory)."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from testcopilot.core.fallbacks import log_best_effort_failure, warn_best_effort
from testcopilot.utils import PROJECT_ROOT, safe_write_text

CONFIG_FILENAME = "testcopilot.config.json"
CONFIG_FILE = PROJECT_ROOT / CONFIG_FILENAME
logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("console", "json", "scorecard", "both")


@dataclass(frozen=True)
class ConfigKey:
    type: type
    default: object
    description: str


CONFIG_SCHEMA: dict[str, ConfigKey] = {
    "checkers": ConfigKey(
        dict, {}, "Enable/disable checkers {checker_key: bool} (missing = enabled)"
    ),
    "output_format": ConfigKey(
        str, "console", "Report format: console, json, scorecard or both"
    ),
    "issue_explain": ConfigKey(
        bool, False, "Print the plain-language explanation and fix for each issue"
    ),
    "file_summary": ConfigKey(bool, True, "Print a summary paragraph per file"),
    "codebase_analysis": ConfigKey(
        bool, True, "Print the aggregate codebase rating after the scan"
    ),
    "exclude": ConfigKey(list, [], "Path patterns to exclude from scanning"),
    "scorecard_path": ConfigKey(
        str, "testcopilot-scorecard.png", "Output path for the scorecard image"
    ),
}


def _registered_checker_keys() -> list[str]:
    from testcopilot.core.registry import all_checkers

    return [checker.key for checker in all_checkers()]


def default_config() -> dict[str, Any]:
    """Return a config dict with all keys set to their defaults."""
    config = {k: copy.deepcopy(v.default) for k, v in CONFIG_SCHEMA.items()}
    config["checkers"] = {key: True for key in _registered_checker_keys()}
    return config


def _value_ok(key: str, value: object) -> bool:
    schema = CONFIG_SCHEMA[key]
    if schema.type is bool:
        return isinstance(value, bool)
    if not isinstance(value, schema.type):
        return False
    if key == "checkers":
        return all(isinstance(v, bool) for v in value.values())
    if key == "exclude":
        return all(isinstance(v, str) for v in value)
    if key == "output_format":
        return value in OUTPUT_FORMATS
    return True


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load config from disk, falling back to defaults for anything unusable.

    A missing file is silently the default config. Malformed JSON, a non-object
    document, or a wrongly-typed value warns on stderr and keeps the default
    for the affected part; the scan always goes ahead.
    """
    p = Path(path) if path is not None else CONFIG_FILE
    config = default_config()
    if not p.exists():
        return config

    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        log_best_effort_failure(logger, f"read config {p}", exc)
        warn_best_effort(f"Could not read config {p} ({exc}); using defaults.")
        return config

    if not isinstance(raw, dict):
        warn_best_effort(f"Config {p} must be a JSON object; using defaults.")
        return config

    for key, value in raw.items():
        if key not in CONFIG_SCHEMA:
            logger.debug("Ignoring unknown config key %r in %s", key, p)
            continue
        if not _value_ok(key, value):
            warn_best_effort(f"Invalid value for '{key}' in {p}; using default.")
            continue
        if key == "checkers":
            config["checkers"].update(value)
        else:
            config[key] = copy.deepcopy(value)
    return config


def save_config(config: dict, path: Path | None = None) -> None:
    """Save config to disk atomically."""
    p = Path(path) if path is not None else CONFIG_FILE
    safe_write_text(p, json.dumps(config, indent=2) + "\n")


def merge_cli_overrides(config: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *config* with every non-None override applied.

    List overrides extend the configured list (deduplicated) instead of
    replacing it.
    """
    merged = copy.deepcopy(config)
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in CONFIG_SCHEMA:
            raise KeyError(f"Unknown config key: {key}")
        if isinstance(value, list):
            existing = merged.setdefault(key, [])
            existing.extend(v for v in value if v not in existing)
        else:
            merged[key] = value
    return merged


def _parse_bool(key: str, raw: str) -> bool:
    if raw.lower() in ("true", "1", "yes", "on"):
        return True
    if raw.lower() in ("false", "0", "no", "off"):
        return False
    raise ValueError(f"Expected true/false for {key}, got: {raw}")


def set_config_value(config: dict, key: str, raw: str) -> None:
    """Parse and set a config value from a raw string.

    ``checkers.<key>`` toggles a single checker; list keys append.
    """
    if key.startswith("checkers."):
        checker_key = key.split(".", 1)[1]
        if checker_key not in _registered_checker_keys():
            raise KeyError(f"Unknown checker: {checker_key}")
        config.setdefault("checkers", {})[checker_key] = _parse_bool(key, raw)
        return

    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")

    schema = CONFIG_SCHEMA[key]
    if schema.type is bool:
        config[key] = _parse_bool(key, raw)
    elif key == "output_format":
        if raw not in OUTPUT_FORMATS:
            raise ValueError(f"Expected one of {', '.join(OUTPUT_FORMATS)} for {key}, got: {raw}")
        config[key] = raw
    elif schema.type is str:
        if not raw.strip():
            raise ValueError(f"Expected a non-empty value for {key}")
        config[key] = raw.strip()
    elif schema.type is list:
        config.setdefault(key, [])
        if raw not in config[key]:
            config[key].append(raw)
    else:
        raise ValueError(f"Cannot set dict key '{key}' directly; use checkers.<key>")


def unset_config_value(config: dict, key: str) -> None:
    """Reset a config key to its default value."""
    if key not in CONFIG_SCHEMA:
        raise KeyError(f"Unknown config key: {key}")
    config[key] = default_config()[key]


__all__ = [
    "CONFIG_FILE",
    "CONFIG_FILENAME",
    "CONFIG_SCHEMA",
    "ConfigKey",
    "OUTPUT_FORMATS",
    "default_config",
    "load_config",
    "merge_cli_overrides",
    "save_config",
    "set_config_value",
    "unset_config_value",
]

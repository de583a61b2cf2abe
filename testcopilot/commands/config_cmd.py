"""config command: show/set/unset project configuration."""

from __future__ import annotations

from testcopilot.core.config import (
    CONFIG_SCHEMA,
    default_config,
    save_config,
    set_config_value,
    unset_config_value,
)
from testcopilot.core.fallbacks import print_error
from testcopilot.utils import colorize


def cmd_config(args) -> int:
    """Handle config subcommands: show, set, unset."""
    action = getattr(args, "config_action", None)
    if action == "set":
        return _config_set(args)
    if action == "unset":
        return _config_unset(args)
    return _config_show(args)


def _display(value) -> str:
    if isinstance(value, list):
        return ", ".join(value) if value else "(empty)"
    if isinstance(value, dict):
        if not value:
            return "(empty)"
        return ", ".join(f"{k}={'on' if v else 'off'}" for k, v in value.items())
    return str(value)


def _config_show(args) -> int:
    """Print all config keys with current values and descriptions."""
    config = args._config
    defaults = default_config()

    print(colorize("\n  TestCopilot Configuration\n", "bold"))
    for key, schema in CONFIG_SCHEMA.items():
        value = config.get(key, defaults[key])
        default_tag = colorize(" (default)", "dim") if value == defaults[key] else ""
        print(f"  {key:<20} {_display(value)}{default_tag}")
        print(colorize(f"  {'':20} {schema.description}", "dim"))
    print()
    return 0


def _config_set(args) -> int:
    config = args._config
    key = args.config_key
    try:
        set_config_value(config, key, args.config_value)
    except (KeyError, ValueError) as e:
        print_error(str(e).strip("'\""))
        return 1

    save_config(config, args._config_path)
    if key.startswith("checkers."):
        display = config["checkers"][key.split(".", 1)[1]]
    else:
        display = _display(config[key])
    print(colorize(f"  Set {key} = {display}", "green"))
    return 0


def _config_unset(args) -> int:
    """Reset a config key to its default."""
    config = args._config
    key = args.config_key
    try:
        unset_config_value(config, key)
    except KeyError as e:
        print_error(str(e).strip("'\""))
        return 1

    save_config(config, args._config_path)
    print(colorize(f"  Reset {key} to default ({_display(config[key])})", "green"))
    return 0

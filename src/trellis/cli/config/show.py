"""
Trellis config show command.

SUMMARY: Show the merged site configuration

Displays the configuration merged from bundled defaults, trellis.yaml,
trellis.local.yaml and TRELLIS_* environment variables.
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, get_site_root
from trellis.core.config import ConfigManager
from trellis.core.exceptions import TrellisError
from trellis.core.utils.io import dump_yaml_string

SUMMARY = "Show the merged site configuration"


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'cache.backend')",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        manager = ConfigManager(get_site_root(args))
        if args.key:
            value = manager.get(args.key)
        else:
            value = manager.load_config(validate=True)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.key and value is None:
        formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="KeyNotFound")
        return 1

    data = _nest_key(args.key, value) if args.key else value
    if args.json:
        formatter.json_output(data)
    else:
        formatter.text(dump_yaml_string(data).rstrip())
    return 0

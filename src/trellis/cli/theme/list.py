"""
Trellis theme list command.

SUMMARY: List installed themes
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, get_site
from trellis.core.exceptions import TrellisError

SUMMARY = "List installed themes"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--enabled",
        action="store_true",
        help="Only list enabled themes",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    themes = [t for t in site.themes.values() if t.enabled or not args.enabled]
    if args.json:
        formatter.json_output({
            "default": site.default_theme,
            "themes": [
                {
                    "name": t.name,
                    "label": t.label,
                    "base_theme": t.base_theme,
                    "enabled": t.enabled,
                    "default": t.name == site.default_theme,
                    "path": str(t.path),
                }
                for t in themes
            ],
        })
        return 0

    if not themes:
        formatter.text("No themes installed.")
        return 0
    formatter.table(
        ["name", "label", "base theme", "enabled", "default"],
        [(t.name, t.label, t.base_theme, t.enabled, t.name == site.default_theme) for t in themes],
    )
    return 0

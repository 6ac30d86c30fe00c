"""
Trellis theme trail command.

SUMMARY: Show the base theme trail of a theme
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.themes import get_theme_trail

SUMMARY = "Show the base theme trail of a theme"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "theme",
        nargs="?",
        help="Theme machine name (default: the site's default theme)",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            trail = get_theme_trail(ctx)
            theme = ctx.theme
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({
            "theme": theme,
            "trail": [{"name": name, "label": label} for name, label in trail.items()],
        })
        return 0

    if not trail:
        formatter.text(f"Unknown theme: {theme}")
        return 1
    formatter.text(" > ".join(trail))
    return 0

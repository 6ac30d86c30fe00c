"""
Trellis theme setting command.

SUMMARY: Show a resolved theme setting

Without a name, every resolved setting of the theme is shown.
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_theme_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.themes import get_setting, get_settings

SUMMARY = "Show a resolved theme setting"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "name",
        nargs="?",
        help="Setting name (e.g., 'toggle_logo', 'layout')",
    )
    add_theme_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            theme = ctx.theme
            if args.name:
                value = get_setting(ctx, args.name)
            else:
                settings = get_settings(ctx)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if not args.name:
        if args.json:
            formatter.json_output({"theme": theme, "settings": settings})
        else:
            for key in sorted(settings):
                formatter.text(f"{key}: {settings[key]}")
        return 0

    if args.json:
        formatter.json_output({"theme": theme, "name": args.name, "value": value})
        return 0 if value is not None else 1

    if value is None:
        formatter.text(f"Setting not set: {args.name}")
        return 1
    formatter.text(f"{args.name}: {value}")
    return 0

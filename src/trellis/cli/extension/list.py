"""
Trellis extension list command.

SUMMARY: List the extensions available to a theme
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_reset_flag, add_theme_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.extensions import get_extensions

SUMMARY = "List the extensions available to a theme"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_theme_flag(parser)
    add_reset_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            theme = ctx.theme
            extensions = get_extensions(ctx, reset=args.reset)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({
            "theme": theme,
            "extensions": [ext.to_dict() for ext in extensions.values()],
        })
        return 0

    if not extensions:
        formatter.text(f"No extensions for theme {theme}.")
        return 0
    formatter.table(
        ["name", "theme", "enabled", "errors"],
        [(ext.name, ext.theme, ext.enabled, ext.errors) for ext in sorted(extensions.values(), key=lambda e: e.name)],
    )
    return 0

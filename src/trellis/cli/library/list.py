"""
Trellis library list command.

SUMMARY: List libraries declared along a theme trail
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_reset_flag, add_theme_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.libraries import get_libraries

SUMMARY = "List libraries declared along a theme trail"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--missing",
        action="store_true",
        help="Only list libraries that were not found on disk",
    )
    add_theme_flag(parser)
    add_reset_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            theme = ctx.theme
            libraries = get_libraries(ctx, reset=args.reset)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    selected = [lib for lib in libraries.values() if lib.path is None or not args.missing]
    if args.json:
        formatter.json_output({"theme": theme, "libraries": [lib.to_dict() for lib in selected]})
        return 0

    if not selected:
        formatter.text(f"No libraries for theme {theme}.")
        return 0
    formatter.table(
        ["name", "theme", "path"],
        [(lib.name, lib.theme, lib.path) for lib in sorted(selected, key=lambda item: item.name)],
    )
    return 0

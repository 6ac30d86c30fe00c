"""
Trellis extension enabled command.

SUMMARY: Check whether an extension is enabled

Exits 0 when the extension is enabled and 1 otherwise, so it can be used
in shell conditionals.
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_theme_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.extensions import is_extension_enabled

SUMMARY = "Check whether an extension is enabled"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Extension name (e.g., 'layouts')")
    add_theme_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            theme = ctx.theme
            enabled = is_extension_enabled(ctx, args.name)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({"theme": theme, "name": args.name, "enabled": enabled})
    else:
        formatter.text(f"{args.name}: {'enabled' if enabled else 'disabled'}")
    return 0 if enabled else 1

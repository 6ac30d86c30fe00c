"""
Trellis layout active command.

SUMMARY: Show the layout the theme renders pages with
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_theme_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.layouts import get_active_layout

SUMMARY = "Show the layout the theme renders pages with"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_theme_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site, theme=args.theme) as ctx:
            theme = ctx.theme
            layout = get_active_layout(ctx)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({"theme": theme, "layout": layout.to_dict() if layout else None})
        return 0

    if layout is None:
        formatter.text(f"No active layout for theme {theme}.")
        return 0
    formatter.text(f"{layout.name} (template: {layout.template}, from {layout.theme})")
    for asset in layout.attached:
        formatter.text_kv(asset.type, f"{asset.path}" + (f" [{asset.media}]" if asset.media else ""))
    return 0

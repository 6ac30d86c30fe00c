"""
Trellis layout list command.

SUMMARY: List layouts of every installed theme
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, add_reset_flag, get_site
from trellis.core.context import request
from trellis.core.exceptions import TrellisError
from trellis.core.layouts import get_layouts

SUMMARY = "List layouts of every installed theme"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_reset_flag(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        with request(site) as ctx:
            layouts = get_layouts(ctx, reset=args.reset)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({"layouts": [layout.to_dict() for layout in layouts.values()]})
        return 0

    if not layouts:
        formatter.text("No layouts found.")
        return 0
    formatter.table(
        ["name", "theme", "template", "assets"],
        [(layout.name, layout.theme, layout.template, len(layout.attached)) for layout in sorted(layouts.values(), key=lambda item: item.name)],
    )
    return 0

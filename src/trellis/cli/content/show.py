"""
Trellis content show command.

SUMMARY: Show exported content types, roles and views API level
"""

from __future__ import annotations

import argparse
from typing import Any, Callable, Dict

from trellis.cli import OutputFormatter, add_json_flag
from trellis.core.content import get_default_roles, get_node_types, get_views_api
from trellis.core.utils.io import dump_yaml_string

SUMMARY = "Show exported content types, roles and views API level"

SECTIONS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "node-types": get_node_types,
    "roles": get_default_roles,
    "views-api": get_views_api,
}


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "section",
        nargs="?",
        choices=sorted(SECTIONS),
        help="Section to show (default: all)",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    names = [args.section] if args.section else sorted(SECTIONS)
    data = {name: SECTIONS[name]() for name in names}

    if args.json:
        formatter.json_output(data)
    else:
        formatter.text(dump_yaml_string(data).rstrip())
    return 0

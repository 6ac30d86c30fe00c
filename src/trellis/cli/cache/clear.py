"""
Trellis cache clear command.

SUMMARY: Clear cached extensions, layouts and libraries
"""

from __future__ import annotations

import argparse

from trellis.cli import OutputFormatter, add_json_flag, get_site
from trellis.core.context import clear_caches, request
from trellis.core.exceptions import TrellisError

SUMMARY = "Clear cached extensions, layouts and libraries"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--expired",
        action="store_true",
        help="Only drop temporary and expired entries",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)

    try:
        site = get_site(args)
        if args.expired:
            removed = site.cache.clear()
        else:
            with request(site) as ctx:
                removed = clear_caches(ctx)
    except TrellisError as exc:
        formatter.error(exc)
        return 1

    if args.json:
        formatter.json_output({"namespace": site.namespace, "removed": removed})
    else:
        formatter.text(f"Removed {removed} cache entr{'y' if removed == 1 else 'ies'}.")
    return 0

"""
Auto-discovery CLI dispatcher for Trellis.

Scans subfolders for commands and automatically registers them.
Adding new commands = just add a .py file to the appropriate subfolder
exposing ``SUMMARY``, ``register_args(parser)`` and ``main(args) -> int``.
"""

from __future__ import annotations

import argparse
import importlib
import sys
from contextlib import nullcontext
from functools import lru_cache
from pathlib import Path
from typing import Any

from trellis.core.utils.profiling import Profiler, enable_profiler, span


@lru_cache(maxsize=1)
def discover_domains() -> dict[str, Path]:
    """
    Discover all CLI domain subfolders (theme, layout, cache, etc.).

    Returns:
        Dict mapping domain name to directory path
    """
    cli_dir = Path(__file__).parent
    domains = {}
    for item in cli_dir.iterdir():
        if item.is_dir() and not item.name.startswith("_"):
            # Must have at least one non-init .py file
            has_commands = any(
                f.suffix == ".py" and not f.name.startswith("_")
                for f in item.iterdir()
            )
            if has_commands:
                domains[item.name] = item
    return domains


@lru_cache(maxsize=32)
def discover_commands(domain: str) -> dict[str, dict[str, Any]]:
    """
    Discover all commands in a domain subfolder.

    Args:
        domain: Name of the domain (e.g., "theme", "layout")

    Returns:
        Dict mapping command name to command info dict
    """
    with span("cli.discover.domain_commands", domain=domain):
        domain_dir = Path(__file__).parent / domain
    commands: dict[str, dict[str, Any]] = {}

    for item in domain_dir.glob("*.py"):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        try:
            with span("cli.discover.import", module=f"trellis.cli.{domain}.{cmd_name}"):
                module = importlib.import_module(f"trellis.cli.{domain}.{cmd_name}")
            commands[cmd_name] = {
                "module": module,
                "summary": getattr(module, "SUMMARY", f"{domain} {cmd_name}"),
                "register_args": getattr(module, "register_args", None),
                "main": getattr(module, "main", None),
            }
        except ImportError as e:
            print(f"Warning: Could not import {domain}.{cmd_name}: {e}", file=sys.stderr)
            continue

    return commands


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with auto-discovered domains and commands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="trellis",
        description="Trellis - theme configuration resolution for Drupal-style sites",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--site",
        type=str,
        default=None,
        help="Site root (default: TRELLIS_SITE_ROOT or the nearest directory holding trellis.yaml)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Emit span timings and counters for the command (sent to stderr).",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="domains",
        description="Available command domains",
        metavar="<domain>",
    )

    for domain_name in sorted(discover_domains().keys()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue

        domain_parser = subparsers.add_parser(
            domain_name,
            help=f"{domain_name.title()} commands",
        )
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            description=f"Available {domain_name} commands",
            metavar="<command>",
        )

        for cmd_name, cmd_info in sorted(domain_commands.items()):
            primary_name = cmd_name.replace("_", "-")
            aliases = [cmd_name] if primary_name != cmd_name else []
            cmd_parser = cmd_subparsers.add_parser(
                primary_name,
                aliases=aliases,
                help=cmd_info["summary"],
            )

            # Let module register its own arguments
            if cmd_info["register_args"]:
                cmd_info["register_args"](cmd_parser)

            if cmd_info["main"]:
                cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from trellis import __version__

    return __version__


def _print_profile(profiler: Profiler) -> None:
    totals = profiler.summary_ms()
    top = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:50]
    print("\nProfiling (top spans):", file=sys.stderr)
    for name, ms in top:
        print(f"- {name}: {ms:.1f}ms", file=sys.stderr)
    counters = profiler.counters
    if counters:
        print("Counters:", file=sys.stderr)
        for name, value in sorted(counters.items()):
            print(f"- {name}: {value}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for Trellis CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(list(argv))

    # If no domain specified, show help
    if not args.domain:
        parser.print_help()
        return 0

    # If no command specified, show domain help
    if not getattr(args, "_func", None):
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 0

    profiler = Profiler() if args.profile else None
    ctx = enable_profiler(profiler) if profiler else nullcontext()

    with ctx:
        with span("cli.total", domain=args.domain, command=args.command):
            result = args._func(args)

    if profiler is not None:
        _print_profile(profiler)

    return int(result or 0)


if __name__ == "__main__":
    sys.exit(main())

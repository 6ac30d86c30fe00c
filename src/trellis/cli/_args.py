"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_theme_flag(parser: argparse.ArgumentParser) -> None:
    """Add --theme flag selecting the theme a request runs against."""
    parser.add_argument(
        "--theme",
        type=str,
        default=None,
        help="Theme machine name (default: the site's default theme)",
    )


def add_reset_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Ignore cached results and rebuild",
    )


__all__ = ["add_json_flag", "add_theme_flag", "add_reset_flag"]

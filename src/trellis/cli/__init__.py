"""
Trellis CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (theme/, extension/, layout/, etc.).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Site loading and logging setup
"""
from ._args import add_json_flag, add_reset_flag, add_theme_flag
from ._output import OutputFormatter, format_json
from ._utils import get_site, get_site_root, setup_logging

__all__ = [
    # Output formatting
    "OutputFormatter",
    "format_json",
    # Argument helpers
    "add_json_flag",
    "add_theme_flag",
    "add_reset_flag",
    # Utilities
    "get_site",
    "get_site_root",
    "setup_logging",
]

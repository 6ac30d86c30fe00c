"""I/O utilities for Trellis.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management
- JSON: read/write (persistent cache entries)
- YAML: read and dump (site configuration)
"""
from __future__ import annotations

from .core import (
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
)
from .json import (
    read_json,
    write_json_atomic,
)
from .yaml import (
    dump_yaml_string,
    read_yaml,
)

__all__ = [
    # core
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    # json
    "read_json",
    "write_json_atomic",
    # yaml
    "read_yaml",
    "dump_yaml_string",
]

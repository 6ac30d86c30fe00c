"""Value helpers for info-file data.

Info files and saved settings carry loosely typed values ("0", "", 1, TRUE).
These helpers give them one consistent truthiness and a JSON-safe shape
for the persistent cache.
"""
from __future__ import annotations

from pathlib import PurePath
from typing import Any, Mapping


def is_empty(value: Any) -> bool:
    """Return True for values an info file treats as "not set".

    Example:
        >>> [is_empty(v) for v in (None, False, 0, "", "0", [], {})]
        [True, True, True, True, True, True, True]
        >>> is_empty("FALSE")
        False
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and value == 0:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def truthy(value: Any) -> bool:
    return not is_empty(value)


def to_json_native(value: Any) -> Any:
    """Convert hook-supplied data to the shape it has after a JSON round trip.

    Mappings get string keys, tuples and sets become lists, paths and other
    objects become strings.

    Example:
        >>> to_json_native({"files": ("a.js", "b.js"), 1: PurePath("/opt")})
        {'files': ['a.js', 'b.js'], '1': '/opt'}
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Mapping):
        return {str(key): to_json_native(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_native(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [to_json_native(item) for item in sorted(value, key=repr)]
    if isinstance(value, PurePath):
        return value.as_posix()
    return str(value)


__all__ = ["is_empty", "truthy", "to_json_native"]

"""Canonical merge utilities.

Two merge flavours live here:

- ``deep_merge`` / ``merge_arrays`` merge configuration layers. Arrays use
  override semantics:
  - Default: replace array entirely
  - Prefix with "+": append to existing array
  - Prefix with "=": explicit replace (same as default)
- ``merge_recursive`` merges hook results collected across a theme trail.
  Nested mappings recurse, leaf scalars are last-writer-wins and lists are
  concatenated, so list contributions from several themes accumulate.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Args:
        base: Base dictionary (lower priority)
        override: Override dictionary (higher priority)

    Returns:
        New merged dictionary

    Example:
        >>> base = {"a": 1, "b": {"c": 2}}
        >>> override = {"b": {"d": 3}}
        >>> deep_merge(base, override)
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result:
            if isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            elif isinstance(result[key], list) and isinstance(value, list):
                result[key] = merge_arrays(result[key], value)
            else:
                result[key] = value
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge arrays with override semantics.

    Example:
        >>> merge_arrays([1, 2], [3, 4])
        [3, 4]
        >>> merge_arrays([1, 2], ["+", 3, 4])
        [1, 2, 3, 4]
        >>> merge_arrays([1, 2], ["=", 3, 4])
        [3, 4]
    """
    if not override:
        return base
    first = override[0]
    if isinstance(first, str):
        if first.startswith("+"):
            return [*base, *override[1:]]
        if first == "=":
            return list(override[1:])
    return list(override)


def merge_recursive(base: Mapping[str, Any], addition: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge hook results the way trail contributions accumulate.

    Example:
        >>> merge_recursive({"a": {"x": 1, "l": [1]}}, {"a": {"x": 2, "l": [2]}})
        {'a': {'x': 2, 'l': [1, 2]}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in addition.items():
        current = result.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            result[key] = merge_recursive(current, value)
        elif isinstance(current, list) and isinstance(value, list):
            result[key] = [*current, *value]
        else:
            result[key] = value
    return result


__all__ = ["deep_merge", "merge_arrays", "merge_recursive"]

"""Info file parser.

Info files are the declarative metadata format used by themes, modules,
extensions and layouts::

    ; Comments start with a semicolon.
    name = Simple layout
    template = simple-layout
    regions[header] = Header
    stylesheets[all][] = css/layout.css
    enabled = TRUE

Bracketed keys build nested mappings, ``[]`` appends to a list, quoted
values are unquoted and bare ``TRUE``/``FALSE``/``NULL`` become Python
constants. Everything else stays a string.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Union

from trellis.core.exceptions import InfoParseError

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(
    r"""
    ^\s*
    (?P<key>(?:[^=;\[\]]|\[[^\[\]]*\])+?)
    \s*=\s*
    (?:
        (?P<double>"(?:[^"]|(?<=\\)")*")
      | (?P<single>'(?:[^']|(?<=\\)')*')
      | (?P<bare>[^\r\n]*?)
    )
    \s*$
    """,
    re.MULTILINE | re.VERBOSE,
)
_KEY_SPLIT_RE = re.compile(r"\]?\[")
_CONSTANTS = {"true": True, "false": False, "null": None}

_MISSING = object()


def _normalize_key(key: str) -> Union[str, int]:
    return int(key) if key.isdigit() else key


def _next_index(container: Dict[Any, Any]) -> int:
    ints = [k for k in container if isinstance(k, int)]
    return max(ints) + 1 if ints else 0


def _finalize(value: Any) -> Any:
    """Turn sequentially indexed mappings into lists, stringify other keys."""
    if not isinstance(value, dict):
        return value
    items = {k: _finalize(v) for k, v in value.items()}
    if items and list(items.keys()) == list(range(len(items))):
        return list(items.values())
    return {str(k): v for k, v in items.items()}


def parse_info_format(text: str) -> Dict[str, Any]:
    """Parse info file contents into a nested dictionary.

    Example:
        >>> parse_info_format("name = Foo\\nstylesheets[all][] = a.css\\nenabled = TRUE")
        {'name': 'Foo', 'stylesheets': {'all': ['a.css']}, 'enabled': True}
    """
    info: Dict[Any, Any] = {}

    for match in _LINE_RE.finditer(text):
        raw_key = match.group("key")
        if match.group("double") is not None:
            value: Any = match.group("double")[1:-1]
        elif match.group("single") is not None:
            value = match.group("single")[1:-1]
        else:
            value = match.group("bare") or ""
            constant = _CONSTANTS.get(value.lower(), _MISSING)
            if constant is not _MISSING:
                value = constant

        keys = _KEY_SPLIT_RE.split(raw_key.rstrip("]"))
        last = keys.pop()
        parent: Dict[Any, Any] = info
        for key in keys:
            step: Union[str, int] = _next_index(parent) if key == "" else _normalize_key(key)
            if not isinstance(parent.get(step), dict):
                parent[step] = {}
            parent = parent[step]

        leaf: Union[str, int] = _next_index(parent) if last == "" else _normalize_key(last)
        parent[leaf] = value

    return _finalize(info)


def read_info(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read and parse an info file.

    Returns ``default`` when the file is missing, unreadable or not valid
    UTF-8, unless ``raise_on_error`` is True.

    Raises:
        InfoParseError: When ``raise_on_error`` is True and the file can't be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        if raise_on_error:
            raise InfoParseError(f"Unable to read info file: {exc}", path=str(path)) from exc
        logger.debug("Skipping unreadable info file %s: %s", path, exc)
        return default
    return parse_info_format(text)


__all__ = ["parse_info_format", "read_info"]

"""Process-wide logging setup for the CLI.

Library modules only create loggers (``logging.getLogger(__name__)``);
handlers are installed here, once per process.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from trellis.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_TARGET: Optional[str] = None
_TRELLIS_HANDLER: Optional[logging.Handler] = None
_JSON_MODE_NULL_HANDLER: Optional[logging.Handler] = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Install the Trellis handler on the root logger.

    With ``log_path`` records go to that file, otherwise to stderr.
    Calling again with the same target only updates the level.
    """
    global _CONFIGURED_TARGET, _TRELLIS_HANDLER

    target = str(Path(log_path).resolve()) if log_path else "<stderr>"
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    if _CONFIGURED_TARGET == target and _TRELLIS_HANDLER is not None:
        _TRELLIS_HANDLER.setLevel(_level_from_name(level))
        return

    if _TRELLIS_HANDLER is not None:
        root.removeHandler(_TRELLIS_HANDLER)
        _TRELLIS_HANDLER.close()
        _TRELLIS_HANDLER = None

    handler: logging.Handler
    if log_path:
        ensure_directory(Path(target).parent)
        handler = logging.FileHandler(target, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_level_from_name(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    _TRELLIS_HANDLER = handler
    _CONFIGURED_TARGET = target


def suppress_lastresort_in_json_mode() -> None:
    """Keep stdlib's lastResort handler from writing to stderr under ``--json``.

    A root logger without handlers falls back to lastResort for WARNING and
    above; a NullHandler stops that without changing levels.
    """
    global _JSON_MODE_NULL_HANDLER

    root = logging.getLogger()
    if root.handlers or _JSON_MODE_NULL_HANDLER is not None:
        return
    _JSON_MODE_NULL_HANDLER = logging.NullHandler()
    root.addHandler(_JSON_MODE_NULL_HANDLER)


def reset_logging_for_tests() -> None:
    """Test-only: remove the handlers installed here and forget the configured target."""
    global _CONFIGURED_TARGET, _TRELLIS_HANDLER, _JSON_MODE_NULL_HANDLER
    root = logging.getLogger()
    for handler in (_TRELLIS_HANDLER, _JSON_MODE_NULL_HANDLER):
        if handler is not None:
            root.removeHandler(handler)
            handler.close()
    _CONFIGURED_TARGET = None
    _TRELLIS_HANDLER = None
    _JSON_MODE_NULL_HANDLER = None


__all__ = ["configure_logging", "suppress_lastresort_in_json_mode", "reset_logging_for_tests"]

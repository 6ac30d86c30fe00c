"""Unified CLI output formatting utilities.

Every command prints through ``OutputFormatter`` so ``--json`` output stays
machine-readable and text output stays consistent.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, List, Optional, Sequence

from trellis.core.exceptions import TrellisError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
    ) -> None:
        """Output an error to stderr.

        Trellis errors carry their class name as code and their context.
        """
        msg = message or str(error)
        if self.json_mode:
            if isinstance(error, TrellisError):
                output: Dict[str, Any] = error.to_json_error()
                output["message"] = msg
            else:
                output = {"message": msg, "code": error_code or "error", "context": {}}
            if error_code:
                output["code"] = error_code
            print(json.dumps({"error": output}, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(format_json(data, self.indent))

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode."""
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")

    def table(self, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
        """Output rows as an aligned plain-text table."""
        text_rows: List[List[str]] = [[_cell(v) for v in row] for row in rows]
        widths = [len(h) for h in headers]
        for row in text_rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(cell))
        print("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)).rstrip())
        print("  ".join("-" * w for w in widths))
        for row in text_rows:
            print("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())


def _cell(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    return str(value)


def format_json(data: Any, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, default=str)


__all__ = ["OutputFormatter", "format_json"]

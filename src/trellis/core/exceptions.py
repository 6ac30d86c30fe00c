from __future__ import annotations

from typing import Any, Dict, Mapping


class TrellisError(Exception):
    """Base exception for Trellis."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class ConfigError(TrellisError, ValueError):
    """Raised when site configuration is unreadable or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TrellisError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class SiteNotFoundError(TrellisError, FileNotFoundError):
    """Raised when no site root can be located."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TrellisError.__init__(self, message, context=context)
        FileNotFoundError.__init__(self, message)


class InfoParseError(TrellisError):
    """Raised when an info file cannot be read."""

    def __init__(self, message: str, *, path: str | None = None, context: Mapping[str, Any] | None = None) -> None:
        ctx = dict(context or {})
        if path:
            ctx["path"] = path
        super().__init__(message, context=ctx)


class CacheError(TrellisError, RuntimeError):
    """Raised for persistent cache backend failures."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TrellisError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


__all__ = [
    "TrellisError",
    "ConfigError",
    "SiteNotFoundError",
    "InfoParseError",
    "CacheError",
]

"""Info file parsing."""

from .parser import parse_info_format, read_info

__all__ = ["parse_info_format", "read_info"]

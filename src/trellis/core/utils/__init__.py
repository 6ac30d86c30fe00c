"""Utility helpers for Trellis core.

- io/: File I/O (atomic writes, JSON, YAML)
- merge: Config layer merging and hook result merging
- profiling: Spans and counters
- values: Info-file truthiness
"""
from __future__ import annotations

from .merge import deep_merge, merge_arrays, merge_recursive
from .values import is_empty, truthy

__all__ = ["deep_merge", "merge_arrays", "merge_recursive", "is_empty", "truthy"]

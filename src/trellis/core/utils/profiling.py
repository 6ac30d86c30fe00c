"""Lightweight hierarchical profiler for Trellis.

Goals:
- Zero overhead when disabled (no-op span and count helpers).
- Works across the whole codebase without invasive plumbing (ContextVar-based).
- Counts discrete events (filesystem scans, cache hits) next to timed spans.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, asdict
from time import perf_counter
from typing import Any, Dict, Iterator, List


_ACTIVE_PROFILER: ContextVar["Profiler | None"] = ContextVar("_ACTIVE_PROFILER", default=None)


@dataclass(frozen=True)
class SpanRecord:
    name: str
    duration_ms: float
    depth: int
    meta: Dict[str, Any]


class Profiler:
    """Collects spans in a hierarchical fashion plus named counters."""

    def __init__(self) -> None:
        self._spans: List[SpanRecord] = []
        self._depth: int = 0
        self._counters: Dict[str, int] = {}

    @property
    def spans(self) -> List[SpanRecord]:
        return list(self._spans)

    @property
    def counters(self) -> Dict[str, int]:
        return dict(self._counters)

    @contextmanager
    def span(self, name: str, **meta: Any) -> Iterator[None]:
        start = perf_counter()
        depth = self._depth
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self._spans.append(
                SpanRecord(
                    name=name,
                    duration_ms=(perf_counter() - start) * 1000.0,
                    depth=depth,
                    meta=dict(meta),
                )
            )

    def count(self, name: str, amount: int = 1) -> None:
        self._counters[name] = self._counters.get(name, 0) + amount

    def summary_ms(self) -> Dict[str, float]:
        totals: Dict[str, float] = {}
        for s in self._spans:
            totals[s.name] = totals.get(s.name, 0.0) + s.duration_ms
        return totals

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spans": [asdict(s) for s in self._spans],
            "summary_ms": self.summary_ms(),
            "counters": self.counters,
        }


@contextmanager
def enable_profiler(profiler: Profiler) -> Iterator[Profiler]:
    token = _ACTIVE_PROFILER.set(profiler)
    try:
        yield profiler
    finally:
        _ACTIVE_PROFILER.reset(token)


@contextmanager
def span(name: str, **meta: Any) -> Iterator[None]:
    profiler = _ACTIVE_PROFILER.get()
    if profiler is None:
        yield
        return
    with profiler.span(name, **meta):
        yield


def count(name: str, amount: int = 1) -> None:
    profiler = _ACTIVE_PROFILER.get()
    if profiler is not None:
        profiler.count(name, amount)


__all__ = [
    "Profiler",
    "SpanRecord",
    "enable_profiler",
    "span",
    "count",
]

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from trellis.core import log as trellis_log
from trellis.core.utils.profiling import Profiler, count, enable_profiler, span


@pytest.fixture
def root_level():
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def test_configure_logging_to_file(tmp_path: Path, root_level) -> None:
    log_file = tmp_path / "logs" / "trellis.log"
    trellis_log.configure_logging("INFO", log_file)

    logging.getLogger("trellis.test").info("hello from %s", "trellis")
    logging.getLogger("trellis.test").debug("hidden")
    for handler in logging.getLogger().handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "INFO trellis.test: hello from trellis" in text
    assert "hidden" not in text


def test_configure_logging_is_idempotent(tmp_path: Path, root_level) -> None:
    trellis_log.configure_logging("WARNING")
    trellis_log.configure_logging("DEBUG")

    root = logging.getLogger()
    installed = [h for h in root.handlers if h is trellis_log._TRELLIS_HANDLER]
    assert len(installed) == 1
    assert installed[0].level == logging.DEBUG


def test_json_mode_installs_null_handler_once(monkeypatch: pytest.MonkeyPatch, root_level) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    trellis_log.suppress_lastresort_in_json_mode()
    trellis_log.suppress_lastresort_in_json_mode()

    assert [type(h) for h in root.handlers] == [logging.NullHandler]


def test_reset_leaves_foreign_handlers_alone(root_level) -> None:
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        trellis_log.configure_logging("INFO")
        trellis_log.reset_logging_for_tests()
        assert foreign in root.handlers
        assert trellis_log._TRELLIS_HANDLER is None
    finally:
        root.removeHandler(foreign)


def test_profiler_collects_spans_and_counters() -> None:
    profiler = Profiler()
    with enable_profiler(profiler):
        with span("outer", kind="test"):
            with span("inner"):
                count("events")
                count("events", 2)

    assert [s.name for s in profiler.spans] == ["inner", "outer"]
    assert [s.depth for s in profiler.spans] == [1, 0]
    assert profiler.spans[1].meta == {"kind": "test"}
    assert profiler.counters == {"events": 3}
    assert set(profiler.summary_ms()) == {"inner", "outer"}


def test_span_and_count_are_noops_without_profiler() -> None:
    with span("nothing"):
        count("nothing")


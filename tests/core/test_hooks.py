from __future__ import annotations

import logging

import pytest

from trellis.core.context import request
from trellis.core.hooks import RESULTS_KEY, HookRegistry, alter, invoke_all


def test_theme_module_functions_are_registered(omega_site) -> None:
    omega_site.hooks(
        "omega",
        """
        import os


        def libraries_info():
            return {}


        def _private_helper():
            return None
        """,
    )
    site = omega_site.load()

    assert site.hooks.hooks_for("omega") == ["libraries_info"]
    assert site.hooks.implements("omega", "libraries_info")
    assert not site.hooks.implements("corporate", "libraries_info")


def test_broken_theme_module_is_logged_and_skipped(omega_site, caplog: pytest.LogCaptureFixture) -> None:
    omega_site.hooks("omega", "raise RuntimeError('boom')\n")

    with caplog.at_level(logging.WARNING, logger="trellis.core.hooks"):
        site = omega_site.load()

    assert site.hooks.hooks_for("omega") == []
    assert "boom" in caplog.text


def test_invoke_all_merges_in_trail_order_and_tags_origin(omega_site) -> None:
    site = omega_site.load()
    site.hooks.register("omega", "libraries_info", lambda: {"shiv": {"files": ["a.js"], "version": "1"}})
    site.hooks.register("corporate", "libraries_info", lambda: {"shiv": {"files": ["b.js"], "version": "2"}})

    with request(site) as ctx:
        merged = invoke_all(ctx, "libraries_info")

    assert merged == {"shiv": {"files": ["a.js", "b.js"], "version": "2", "theme": "corporate"}}


def test_invoke_all_collects_non_mapping_results(omega_site) -> None:
    site = omega_site.load()
    site.hooks.register("omega", "page_classes", lambda *args: "omega-page")
    site.hooks.register("corporate", "page_classes", lambda *args: None)

    with request(site) as ctx:
        assert invoke_all(ctx, "page_classes") == {RESULTS_KEY: ["omega-page"]}


def test_invoke_all_passes_arguments(omega_site) -> None:
    site = omega_site.load()
    seen = []
    site.hooks.register("omega", "preprocess", lambda variables: seen.append(variables))

    with request(site) as ctx:
        invoke_all(ctx, "preprocess", None, {"title": "Home"})

    assert seen == [{"title": "Home"}]


def test_alter_runs_global_listeners_before_trail_themes(omega_site) -> None:
    site = omega_site.load()
    calls = []
    site.hooks.add_alter("thing_alter", lambda value, theme: calls.append("global") or value + ["global"])
    site.hooks.register("omega", "thing_alter", lambda value, theme: calls.append("omega") or value + ["omega"])
    site.hooks.register("corporate", "thing_alter", lambda value, theme: calls.append(theme) or None)

    with request(site) as ctx:
        result = alter(ctx, "thing_alter", [])

    assert result == ["global", "omega"]
    assert calls == ["global", "omega", "corporate"]


def test_alter_listeners_follow_given_trail() -> None:
    registry = HookRegistry()
    registry.register("b", "x_alter", len)
    registry.register("a", "x_alter", str)

    assert registry.alter_listeners("x_alter", {"a": "A", "b": "B"}) == [str, len]
    assert registry.alter_listeners("x_alter", {}) == []

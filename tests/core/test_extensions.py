from __future__ import annotations

import dataclasses

from trellis.core.context import request
from trellis.core.extensions import get_extensions, is_extension_enabled
from trellis.core.utils.profiling import Profiler, enable_profiler


def test_enabled_falls_back_to_declared_default(omega_site) -> None:
    omega_site.extension("omega", "layouts", "name = Layouts\nenabled = TRUE\n")
    omega_site.extension("omega", "development", "name = Development\n")
    site = omega_site.load()

    with request(site) as ctx:
        extensions = get_extensions(ctx)

    assert extensions["layouts"].enabled is True
    assert extensions["layouts"].errors is False
    assert extensions["development"].enabled is False


def test_toggle_setting_overrides_declared_default(omega_site) -> None:
    omega_site.extension("omega", "layouts", "name = Layouts\nenabled = TRUE\n")
    omega_site.extension("omega", "development", "name = Development\n")
    omega_site.configure(
        settings={"themes": {"corporate": {"toggle_extension_layouts": 0, "toggle_extension_development": "1"}}}
    )
    site = omega_site.load()

    with request(site) as ctx:
        assert not is_extension_enabled(ctx, "layouts")
        assert is_extension_enabled(ctx, "development")


def test_missing_module_dependency_sets_errors(omega_site) -> None:
    omega_site.extension("omega", "views_support", "name = Views\nenabled = TRUE\ndependencies[] = views\n")
    site = omega_site.load()

    with request(site) as ctx:
        extension = get_extensions(ctx)["views_support"]
        assert extension.errors is True
        assert extension.enabled is True
        assert not is_extension_enabled(ctx, "views_support")


def test_incompatible_module_version_sets_errors(omega_site) -> None:
    omega_site.module("bar", version="7.x-1.5")
    omega_site.module("baz", version="7.x-2.3-dev")
    omega_site.extension("omega", "foo", "enabled = TRUE\ndependencies[] = bar (>=2.0)\n")
    omega_site.extension("omega", "qux", "enabled = TRUE\ndependencies[] = baz (>=7.x-2.0, <3.x)\n")
    site = omega_site.load()

    with request(site) as ctx:
        extensions = get_extensions(ctx)
        assert extensions["foo"].errors is True
        assert extensions["qux"].errors is False
        assert is_extension_enabled(ctx, "qux")


def test_disabled_module_counts_as_missing(omega_site) -> None:
    omega_site.module("bar", version="7.x-2.0")
    omega_site.module("other")
    omega_site.configure(modules={"enabled": ["other"]})
    omega_site.extension("omega", "foo", "enabled = TRUE\ndependencies[] = bar\n")
    site = omega_site.load()

    with request(site) as ctx:
        assert get_extensions(ctx)["foo"].errors is True


def test_unknown_extension_is_not_enabled(omega_site) -> None:
    site = omega_site.load()

    with request(site) as ctx:
        assert not is_extension_enabled(ctx, "nope")


def test_runtime_toggle_resets_memo(omega_site) -> None:
    omega_site.extension("omega", "layouts", "enabled = TRUE\n")
    site = omega_site.load()

    with request(site) as ctx:
        assert is_extension_enabled(ctx, "layouts")
        ctx.toggle_extension("layouts", False)
        assert not is_extension_enabled(ctx, "layouts")
        ctx.toggle_extension("layouts", True)
        assert is_extension_enabled(ctx, "layouts")


def test_site_wide_disabled_extension(omega_site) -> None:
    omega_site.extension("omega", "layouts", "enabled = TRUE\n")
    omega_site.configure(extensions={"disabled": ["layouts"]})
    site = omega_site.load()

    with request(site) as ctx:
        assert get_extensions(ctx)["layouts"].enabled is True
        assert not is_extension_enabled(ctx, "layouts")


def test_alter_listener_can_replace_descriptor(omega_site) -> None:
    omega_site.extension("omega", "layouts", "name = Layouts\n")
    site = omega_site.load()

    def force_enabled(extension, theme):
        return dataclasses.replace(extension, info={**extension.info, "enabled": True})

    site.hooks.add_alter("extension_info_alter", force_enabled)

    with request(site) as ctx:
        assert get_extensions(ctx)["layouts"].enabled is True


def test_persistent_cache_serves_next_request(omega_site) -> None:
    omega_site.extension("omega", "layouts", "name = Layouts\nenabled = TRUE\n")
    site = omega_site.load()

    with request(site) as ctx:
        first = get_extensions(ctx)

    entry = site.cache.get("trellis:corporate:extensions")
    assert entry is not None
    assert entry.data["layouts"]["enabled"] is True

    profiler = Profiler()
    with enable_profiler(profiler), request(site) as ctx:
        second = get_extensions(ctx)
    assert second == first
    assert "discovery.scan" not in profiler.counters


def test_reset_rebuilds_after_filesystem_change(omega_site) -> None:
    omega_site.extension("omega", "layouts")
    site = omega_site.load()

    with request(site) as ctx:
        assert set(get_extensions(ctx)) == {"layouts"}
        omega_site.extension("corporate", "extra")
        assert set(get_extensions(ctx)) == {"layouts"}
        assert set(get_extensions(ctx, reset=True)) == {"layouts", "extra"}

    with request(site) as ctx:
        assert set(get_extensions(ctx)) == {"layouts", "extra"}

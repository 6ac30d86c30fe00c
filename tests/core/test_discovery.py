from __future__ import annotations

from trellis.core.context import request
from trellis.core.discovery import build_exclusion_map, discover, scan_directory
from trellis.core.utils.profiling import Profiler, enable_profiler


def test_discovers_modern_and_legacy_definitions(omega_site) -> None:
    omega_site.extension("omega", "layouts", "name = Layouts\nenabled = TRUE\n")
    omega_site.extension("omega", "compat", "name = Compat\n", legacy=True)
    site = omega_site.load()

    with request(site) as ctx:
        found = discover(ctx, "extension")

    assert set(found) == {"layouts", "compat"}
    assert found["layouts"].info == {"name": "Layouts", "enabled": True}
    assert found["layouts"].theme == "omega"
    assert found["compat"].file.name == "compat.extension.inc"
    assert found["compat"].path == found["compat"].file.parent


def test_modern_suffix_wins_over_legacy_in_same_theme(tmp_path) -> None:
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "foo.extension.inc").write_text("name = Legacy\n")
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "foo.extension").write_text("name = Modern\n")

    found = scan_directory(tmp_path, "extension")

    assert found == {"foo": tmp_path / "b" / "foo.extension"}


def test_sub_theme_definitions_override_base(omega_site) -> None:
    omega_site.extension("omega", "shared", "name = From base\n")
    omega_site.extension("corporate", "shared", "name = From sub\n")
    site = omega_site.load()

    with request(site) as ctx:
        found = discover(ctx, "extension")
        from_base = discover(ctx, "extension", theme="omega")

    assert found["shared"].theme == "corporate"
    assert found["shared"].info["name"] == "From sub"
    assert from_base["shared"].theme == "omega"


def test_base_theme_scan_skips_nested_sub_theme(factory) -> None:
    omega_dir = factory.theme("omega")
    factory.theme("nested", base="omega", directory=omega_dir / "starterkits" / "nested")
    factory.extension("nested", "private", "name = Private\n")
    factory.configure(themes={"default": "nested"})
    site = factory.load()

    assert build_exclusion_map(site) == {"omega": {omega_dir / "starterkits" / "nested"}}

    with request(site) as ctx:
        assert discover(ctx, "extension", theme="omega") == {}
        assert discover(ctx, "extension", theme="nested")["private"].theme == "nested"


def test_unreadable_definition_is_skipped(omega_site) -> None:
    omega_site.extension("omega", "good", "name = Good\n")
    bad = omega_site.theme_dirs["omega"] / "extensions" / "bad" / "bad.extension"
    bad.parent.mkdir(parents=True)
    bad.write_bytes(b"name = \xff\n")
    site = omega_site.load()

    with request(site) as ctx:
        assert set(discover(ctx, "extension")) == {"good"}


def test_discovery_is_idempotent_and_memoized(omega_site) -> None:
    omega_site.extension("omega", "layouts")
    omega_site.layout("omega", "simple")
    site = omega_site.load()

    profiler = Profiler()
    with enable_profiler(profiler):
        with request(site) as ctx:
            first = discover(ctx, "extension")
            again = discover(ctx, "extension")
            scans = profiler.counters["discovery.scan"]

        with request(site) as ctx:
            fresh = discover(ctx, "extension")

    assert first == again == fresh
    # One scan per trail theme, none for the memoized call.
    assert scans == 2


def test_layout_discovery_spans_every_installed_theme(factory) -> None:
    factory.theme("omega")
    factory.theme("corporate", base="omega")
    factory.theme("other")
    factory.layout("omega", "simple")
    factory.layout("other", "wide")
    factory.configure(themes={"default": "corporate"})
    site = factory.load()

    with request(site) as ctx:
        layouts = discover(ctx, "layout")

    assert set(layouts) == {"simple", "wide"}
    assert layouts["wide"].theme == "other"

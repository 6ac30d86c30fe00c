from __future__ import annotations

from pathlib import Path

import pytest

from trellis.core.cache import MemoryCacheBackend
from trellis.core.exceptions import ConfigError, SiteNotFoundError
from trellis.core.site import Site


def test_loads_themes_with_ancestry(omega_site) -> None:
    site = omega_site.load()

    assert set(site.themes) == {"omega", "corporate"}
    corporate = site.themes["corporate"]
    assert corporate.label == "Corporate"
    assert corporate.base_theme == "omega"
    assert corporate.base_themes == ("omega",)
    assert corporate.enabled
    assert corporate.info_file == site.root / "themes" / "corporate" / "corporate.info"
    assert site.themes["omega"].base_themes == ()
    assert site.default_theme == "corporate"


def test_default_theme_is_always_enabled(factory) -> None:
    factory.theme("omega")
    factory.theme("garland")
    factory.configure(themes={"default": "omega"})
    site = factory.load()

    assert site.themes["omega"].enabled
    assert not site.themes["garland"].enabled


def test_later_root_overrides_earlier(factory) -> None:
    factory.theme("omega", label="Core Omega")
    factory.theme("omega", label="Site Omega", directory=factory.root / "sites" / "all" / "themes" / "omega")
    site = factory.load()

    assert site.themes["omega"].label == "Site Omega"
    assert site.themes["omega"].path == site.root / "sites" / "all" / "themes" / "omega"


def test_hidden_directories_and_odd_names_are_skipped(factory) -> None:
    factory.theme("omega")
    factory.file("themes/.git/stale/stale.info", "name = Stale\n")
    factory.file("themes/misc/README.info", "name = Readme\n")
    site = factory.load()

    assert set(site.themes) == {"omega"}


def test_profile_and_site_dir_placeholders(factory) -> None:
    factory.theme("minimal_theme", directory=factory.root / "profiles" / "minimal" / "themes" / "minimal_theme")
    factory.theme("local", directory=factory.root / "sites" / "example.com" / "themes" / "local")
    factory.configure(site={"profile": "minimal", "site_dir": "sites/example.com"})
    site = factory.load()

    assert set(site.themes) == {"minimal_theme", "local"}
    assert site.profile == "minimal"
    assert site.site_dir == "sites/example.com"


def test_unknown_path_placeholder_is_a_config_error(factory) -> None:
    factory.configure(paths={"themes": ["{nope}/themes"]})
    with pytest.raises(ConfigError):
        factory.load()


def test_modules_enabled_by_default_or_by_list(factory) -> None:
    factory.module("libraries", version="7.x-2.2")
    factory.module("views", version="7.x-3.8")

    site = factory.load()
    assert site.module_enabled("libraries")
    assert site.module_enabled("views")
    assert site.module_version("libraries") == "7.x-2.2"
    assert site.module_version("ctools") is None

    factory.configure(modules={"enabled": ["views"]})
    site = factory.load()
    assert not site.module_enabled("libraries")
    assert site.module_enabled("views")
    assert not site.module_enabled("ctools")


def test_overrides_merge_over_loaded_config(omega_site) -> None:
    site = omega_site.load(cache={"backend": "memory", "namespace": "override"})

    assert isinstance(site.cache, MemoryCacheBackend)
    assert site.namespace == "override"
    assert site.cache_id("corporate", "extensions") == "override:corporate:extensions"
    # Untouched sections keep their loaded values.
    assert site.default_theme == "corporate"


def test_settings_and_disabled_extensions_accessors(omega_site) -> None:
    omega_site.configure(
        settings={"themes": {"corporate": {"layout": "wide"}}},
        extensions={"disabled": ["layouts"]},
        libraries={"paths": {"respond": "vendor/respond"}},
    )
    site = omega_site.load()

    assert site.saved_settings("corporate") == {"layout": "wide"}
    assert site.saved_settings("omega") == {}
    assert site.global_settings["toggle_logo"] is True
    assert site.disabled_extensions == {"layouts"}
    assert site.library_paths() == {"respond": "vendor/respond"}


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(SiteNotFoundError) as excinfo:
        Site.load(tmp_path / "missing")
    assert excinfo.value.context["path"].endswith("missing")


def test_theme_hook_modules_are_registered(omega_site) -> None:
    omega_site.hooks(
        "omega",
        """
        def libraries_info():
            return {}
        """,
    )
    site = omega_site.load()

    assert site.hooks.implements("omega", "libraries_info")
    assert not site.hooks.implements("corporate", "libraries_info")
    assert site.hooks.hooks_for("omega") == ["libraries_info"]


def test_malformed_path_template_is_a_config_error(factory) -> None:
    factory.configure(paths={"themes": ["themes/{"]})
    with pytest.raises(ConfigError) as excinfo:
        factory.load()
    assert excinfo.value.context["path"] == "themes/{"


def test_overrides_are_validated_after_merge(omega_site) -> None:
    with pytest.raises(ConfigError):
        omega_site.load(cache={"backend": "redis"})

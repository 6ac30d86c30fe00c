from __future__ import annotations

from trellis.core.context import RequestContext, request
from trellis.core.themes import get_setting, get_settings


def test_setting_precedence_saved_over_sub_over_base_over_global(omega_site) -> None:
    omega_site.configure(
        settings={
            "global": {"precedence": "global", "only_global": "g"},
            "themes": {"corporate": {"precedence": "saved"}},
        }
    )
    omega_site.theme(
        "omega",
        label="Omega",
        body="""
        settings[precedence] = base
        settings[only_base] = b
        """,
    )
    omega_site.theme(
        "corporate",
        base="omega",
        label="Corporate",
        body="""
        settings[precedence] = sub
        settings[only_sub] = s
        """,
    )
    site = omega_site.load()

    with request(site) as ctx:
        assert get_setting(ctx, "precedence") == "saved"
        assert get_setting(ctx, "only_sub") == "s"
        assert get_setting(ctx, "only_base") == "b"
        assert get_setting(ctx, "only_global") == "g"
        assert get_setting(ctx, "undefined", "fallback") == "fallback"
        assert get_setting(ctx, "undefined") is None

        # Without the saved tier, the sub-theme wins; the base theme sees only itself.
        assert get_setting(ctx, "precedence", theme="omega") == "base"
        assert get_setting(ctx, "only_sub", theme="omega") is None


def test_bundled_global_defaults_apply(omega_site) -> None:
    site = omega_site.load()

    with request(site) as ctx:
        assert get_setting(ctx, "toggle_name") is True
        # Overridden by the base theme info file.
        assert get_setting(ctx, "toggle_logo") == "0"
        assert get_setting(ctx, "omega_setting") == "sub"


def test_none_does_not_shadow_lower_tier(omega_site) -> None:
    omega_site.configure(settings={"themes": {"corporate": {"omega_setting": None}}})
    site = omega_site.load()

    with request(site) as ctx:
        assert get_setting(ctx, "omega_setting", "fallback") == "sub"
        assert get_setting(ctx, "never_set", "fallback") == "fallback"


def test_settings_are_memoized_and_copied(omega_site) -> None:
    site = omega_site.load()

    with request(site) as ctx:
        settings = get_settings(ctx)
        settings["omega_setting"] = "mutated"

        assert get_setting(ctx, "omega_setting") == "sub"
        assert "corporate" in ctx.statics.get("theme_settings")


def test_unknown_theme_gets_global_defaults_only(omega_site) -> None:
    site = omega_site.load()

    with request(site) as ctx:
        assert get_setting(ctx, "toggle_name", theme="missing") is True
        assert get_setting(ctx, "omega_setting", theme="missing") is None


def test_precomputed_trail_skips_uninstalled_themes(omega_site) -> None:
    site = omega_site.load()
    ctx = RequestContext(site, theme="corporate", trail={"ghost": "Ghost", "corporate": "Corporate"})

    assert get_setting(ctx, "omega_setting", "fallback") == "sub"

"""Layered theme settings.

Settings for a theme are assembled from four tiers, later tiers winning:

1. global defaults (bundled defaults + ``settings.global`` in site config)
2. ``settings[...]`` in each base theme's info file, deepest base first
3. ``settings[...]`` in the theme's own info file
4. saved settings for the theme (``settings.themes.<theme>``)

The assembled mapping is memoized per theme for the request.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from trellis.core.themes.trail import get_theme_trail

if TYPE_CHECKING:
    from trellis.core.context import RequestContext


def _layer(settings: Dict[str, Any], tier: Dict[str, Any]) -> None:
    # None never shadows a lower tier.
    settings.update((key, value) for key, value in tier.items() if value is not None)


def _build_settings(ctx: "RequestContext", theme: str) -> Dict[str, Any]:
    site = ctx.site
    settings: Dict[str, Any] = {}
    _layer(settings, site.global_settings)
    if theme not in site.themes:
        return settings

    for key in get_theme_trail(ctx, theme):
        installed = site.themes.get(key)
        if installed is None:
            continue
        info_settings = installed.info.get("settings")
        if isinstance(info_settings, dict):
            _layer(settings, info_settings)

    _layer(settings, site.saved_settings(theme))
    return settings


def _theme_settings(ctx: "RequestContext", theme: Optional[str]) -> Dict[str, Any]:
    theme = theme or ctx.theme
    cache = ctx.statics.get("theme_settings")
    if theme not in cache:
        cache[theme] = _build_settings(ctx, theme)
    return cache[theme]


def get_settings(ctx: "RequestContext", theme: Optional[str] = None) -> Dict[str, Any]:
    """Return a copy of the fully layered settings of ``theme``."""
    return dict(_theme_settings(ctx, theme))


def get_setting(ctx: "RequestContext", name: str, default: Any = None, theme: Optional[str] = None) -> Any:
    """Return setting ``name`` for ``theme``, or ``default`` when no tier sets it."""
    value = _theme_settings(ctx, theme).get(name)
    return default if value is None else value


__all__ = ["get_setting", "get_settings"]

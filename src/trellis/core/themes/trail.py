"""Theme trail resolution.

A theme trail is the ordered ancestor chain of a theme, deepest base theme
first and the theme itself last::

    {"omega": "Omega", "corporate": "Corporate", "corporate_blue": "Corporate Blue"}
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

if TYPE_CHECKING:
    from trellis.core.context import RequestContext

logger = logging.getLogger(__name__)


def find_base_themes(declared: Mapping[str, Optional[str]], theme: str) -> List[str]:
    """Walk declared ``base theme`` keys upwards and return ancestors, deepest first.

    The walk stops at a base theme that is not installed or that would
    close a cycle; both are logged.

    Example:
        >>> find_base_themes({"a": None, "b": "a", "c": "b"}, "c")
        ['a', 'b']
    """
    chain: List[str] = []
    seen = {theme}
    current = declared.get(theme)
    while current:
        if current in seen:
            logger.warning("Theme %s has a base theme cycle through %s", theme, current)
            break
        if current not in declared:
            logger.warning("Theme %s requires missing base theme %s", theme, current)
            break
        chain.append(current)
        seen.add(current)
        current = declared.get(current)
    chain.reverse()
    return chain


def get_theme_trail(ctx: "RequestContext", theme: Optional[str] = None) -> Dict[str, str]:
    """Return the trail of ``theme`` (default: the active theme) as name → label.

    The active theme's trail comes from ``ctx.trail`` when the request was
    started with one. Unknown themes have an empty trail.
    """
    theme = theme or ctx.theme
    cache = ctx.statics.get("theme_trail")
    if theme not in cache:
        if theme == ctx.theme and ctx.trail is not None:
            cache[theme] = dict(ctx.trail)
        else:
            cache[theme] = _build_trail(ctx, theme)
    return dict(cache[theme])


def _build_trail(ctx: "RequestContext", theme: str) -> Dict[str, str]:
    themes = ctx.site.themes
    if theme not in themes:
        logger.debug("No trail for unknown theme %s", theme)
        return {}

    declared = {name: info.base_theme for name, info in themes.items()}
    trail: Dict[str, str] = {}
    for base in find_base_themes(declared, theme):
        trail[base] = themes[base].label
    trail[theme] = themes[theme].label
    return trail


__all__ = ["find_base_themes", "get_theme_trail"]

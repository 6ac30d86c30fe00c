"""Stylesheet and script exclusion.

Themes can drop assets added by other code through the ``css_exclude`` and
``js_exclude`` settings: one glob pattern per line (or a list). Patterns
containing ``/`` are matched against the whole asset path, the others
against its basename::

    settings[css_exclude][] = modules/system/*.css
    settings[css_exclude][] = normalize.css
"""
from __future__ import annotations

import fnmatch
import logging
import re
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Pattern

from trellis.core.cache import CACHE_TEMPORARY
from trellis.core.themes.settings import get_setting

if TYPE_CHECKING:
    from trellis.core.context import RequestContext

logger = logging.getLogger(__name__)


def _split_patterns(raw: Any) -> List[str]:
    if isinstance(raw, str):
        lines = raw.splitlines()
    elif isinstance(raw, (list, tuple)):
        lines = [str(item) for item in raw]
    else:
        return []
    return [line.strip() for line in lines if line.strip()]


def compile_patterns(patterns: List[str]) -> Optional[str]:
    """Compile glob patterns into one anchored regex source, or None when empty.

    Example:
        >>> bool(re.match(compile_patterns(["*.css"]), "theme/css/reset.css"))
        True
    """
    parts: List[str] = []
    for pattern in patterns:
        translated = fnmatch.translate(pattern)
        if "/" in pattern:
            parts.append(f"(?:{translated})")
        else:
            parts.append(f"(?:(?:.*/)?{translated})")
    return "|".join(parts) if parts else None


def get_exclusion_pattern(
    ctx: "RequestContext",
    kind: str,
    theme: Optional[str] = None,
) -> Optional[Pattern[str]]:
    """Return the compiled ``<kind>_exclude`` pattern of ``theme``, or None."""
    theme = theme or ctx.theme
    memo = ctx.statics.get("exclusion_patterns")
    key = (theme, kind)
    if key not in memo:
        site = ctx.site
        cid = site.cache_id(theme, f"{kind}_exclude")
        entry = site.cache.get(cid)
        if entry is not None:
            source = entry.data
        else:
            source = compile_patterns(_split_patterns(get_setting(ctx, f"{kind}_exclude", theme=theme)))
            site.cache.store(cid, source, CACHE_TEMPORARY)
        memo[key] = re.compile(source) if source else None
    return memo[key]


def exclude_assets(
    ctx: "RequestContext",
    assets: Mapping[str, Any],
    kind: str,
    theme: Optional[str] = None,
) -> Dict[str, Any]:
    """Return ``assets`` (keyed by path) without the entries the theme excludes."""
    pattern = get_exclusion_pattern(ctx, kind, theme)
    if pattern is None:
        return dict(assets)
    kept = {path: asset for path, asset in assets.items() if not pattern.match(path)}
    if len(kept) != len(assets):
        logger.debug("Excluded %d %s asset(s)", len(assets) - len(kept), kind)
    return kept


__all__ = ["compile_patterns", "get_exclusion_pattern", "exclude_assets"]

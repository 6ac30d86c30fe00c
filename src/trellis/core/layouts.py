"""Layout registry.

Layouts are discovered across every installed theme, independent of the
active trail. A layout definition names its template and the assets it
needs::

    name = Simple
    template = simple-layout
    regions[content] = Content
    stylesheets[all][] = css/simple.css
    scripts[] = js/simple.js

Asset paths are looked up first below the layout's own directory and then
below the owning theme's root; assets found in neither place are dropped.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from trellis.core.discovery import discover
from trellis.core.extensions import is_extension_enabled
from trellis.core.hooks import alter
from trellis.core.models import LayoutAsset, LayoutDescriptor, PluginDefinition
from trellis.core.themes.settings import get_setting
from trellis.core.utils.profiling import span

if TYPE_CHECKING:
    from trellis.core.context import RequestContext

logger = logging.getLogger(__name__)

LAYOUT_KIND = "layout"
LAYOUTS_EXTENSION = "layouts"
ASSET_GROUP = "theme"
ASSET_WEIGHT = -10


def _resolve_asset(relative: str, layout_dir: Path, theme_dir: Path) -> Optional[Path]:
    for base in (layout_dir, theme_dir):
        candidate = base / relative
        if candidate.is_file():
            return candidate.resolve()
    return None


def _attached_assets(ctx: "RequestContext", definition: PluginDefinition) -> List[LayoutAsset]:
    theme = ctx.site.themes.get(definition.theme)
    theme_dir = theme.path if theme is not None else definition.path
    attached: List[LayoutAsset] = []

    stylesheets = definition.info.get("stylesheets")
    if isinstance(stylesheets, dict):
        for media, files in stylesheets.items():
            for relative in files if isinstance(files, list) else [files]:
                path = _resolve_asset(str(relative), definition.path, theme_dir)
                if path is None:
                    logger.debug("Layout %s: stylesheet %s not found", definition.name, relative)
                    continue
                attached.append(LayoutAsset(path=path, type="css", media=str(media), group=ASSET_GROUP, weight=ASSET_WEIGHT))

    scripts = definition.info.get("scripts")
    if isinstance(scripts, str):
        scripts = [scripts]
    if isinstance(scripts, list):
        for relative in scripts:
            path = _resolve_asset(str(relative), definition.path, theme_dir)
            if path is None:
                logger.debug("Layout %s: script %s not found", definition.name, relative)
                continue
            attached.append(LayoutAsset(path=path, type="js", group=ASSET_GROUP, weight=ASSET_WEIGHT))

    return attached


def _build_layouts(ctx: "RequestContext") -> Dict[str, LayoutDescriptor]:
    layouts: Dict[str, LayoutDescriptor] = {}
    for name, definition in discover(ctx, LAYOUT_KIND).items():
        layouts[name] = LayoutDescriptor(
            name=name,
            path=definition.path,
            file=definition.file,
            theme=definition.theme,
            template=str(definition.info.get("template") or name),
            info=dict(definition.info),
            attached=tuple(_attached_assets(ctx, definition)),
        )
    return alter(ctx, "layouts_info_alter", layouts)


def get_layouts(ctx: "RequestContext", reset: bool = False) -> Dict[str, LayoutDescriptor]:
    """Return every layout of every installed theme, keyed by name."""
    statics = ctx.statics.get("layouts")
    if reset:
        statics.clear()
        ctx.statics.get("discovery").pop((None, LAYOUT_KIND), None)
        ctx.statics.reset("active_layout")
    elif "all" in statics:
        return dict(statics["all"])

    site = ctx.site
    cid = site.cache_id("layouts")
    layouts: Optional[Dict[str, LayoutDescriptor]] = None
    if not reset:
        entry = site.cache.get(cid)
        if entry is not None and isinstance(entry.data, dict):
            layouts = {name: LayoutDescriptor.from_dict(data) for name, data in entry.data.items()}

    if layouts is None:
        with span("layouts.build"):
            layouts = _build_layouts(ctx)
        site.cache.store(cid, {name: layout.to_dict() for name, layout in layouts.items()})

    statics["all"] = layouts
    return dict(layouts)


def get_active_layout(ctx: "RequestContext") -> Optional[LayoutDescriptor]:
    """Resolve the layout for the current page, or None."""
    memo = ctx.statics.get("active_layout")
    if ctx.theme not in memo:
        name: Any = None
        if is_extension_enabled(ctx, LAYOUTS_EXTENSION):
            name = get_setting(ctx, "layout")
        name = alter(ctx, "layout_alter", name)
        memo[ctx.theme] = get_layouts(ctx).get(str(name)) if name else None
    return memo[ctx.theme]


__all__ = ["get_layouts", "get_active_layout", "LAYOUT_KIND", "LAYOUTS_EXTENSION"]

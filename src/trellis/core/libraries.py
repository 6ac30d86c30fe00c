"""Library registry.

Themes declare third-party libraries by implementing ``libraries_info``
in their ``template.py``; declarations from the whole trail are merged.
Each library is then located on disk, checking in order:

1. ``libraries/<name>`` in the declaring theme
2. ``libraries/<name>`` in the other trail themes, sub-theme first
3. the ``libraries`` module's registered location (``libraries.paths``),
   only when that module is enabled
4. ``libraries``, ``profiles/<profile>/libraries``, ``sites/all/libraries``
   and ``<site_dir>/libraries`` below the site root

The first existing directory wins. A library that is found nowhere keeps
``path = None``.
"""
from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional

from trellis.core.hooks import RESULTS_KEY, alter, invoke_all
from trellis.core.models import LibraryDescriptor
from trellis.core.themes.trail import get_theme_trail
from trellis.core.utils.profiling import span
from trellis.core.utils.values import to_json_native

if TYPE_CHECKING:
    from trellis.core.context import RequestContext

logger = logging.getLogger(__name__)

LIBRARIES_MODULE = "libraries"


def library_search_paths(ctx: "RequestContext", name: str, declaring: Optional[str], theme: str) -> List[Path]:
    """Return candidate directories for library ``name`` in lookup order."""
    site = ctx.site
    candidates: List[Path] = []

    if declaring in site.themes:
        candidates.append(site.themes[declaring].path / "libraries" / name)
    for key in reversed(list(get_theme_trail(ctx, theme))):
        if key != declaring and key in site.themes:
            candidates.append(site.themes[key].path / "libraries" / name)

    if site.module_enabled(LIBRARIES_MODULE):
        registered = site.library_paths().get(name)
        if registered:
            path = Path(registered)
            candidates.append(path if path.is_absolute() else site.root / path)

    for relative in (
        "libraries",
        f"profiles/{site.profile}/libraries",
        "sites/all/libraries",
        f"{site.site_dir}/libraries",
    ):
        candidates.append(site.root / relative / name)
    return candidates


def _resolve_path(ctx: "RequestContext", name: str, declaring: Optional[str], theme: str) -> Optional[Path]:
    for candidate in library_search_paths(ctx, name, declaring, theme):
        if candidate.is_dir():
            return candidate.resolve()
    logger.debug("Library %s not found for theme %s", name, theme)
    return None


def _build_libraries(ctx: "RequestContext", theme: str) -> Dict[str, LibraryDescriptor]:
    declared = invoke_all(ctx, "libraries_info", theme)
    libraries: Dict[str, LibraryDescriptor] = {}
    for name, info in declared.items():
        if name == RESULTS_KEY or not isinstance(info, Mapping):
            continue
        declaring = info.get("theme")
        libraries[name] = LibraryDescriptor(
            name=name,
            path=_resolve_path(ctx, name, declaring, theme),
            theme=declaring,
            info=dict(info),
        )
    altered = alter(ctx, "libraries_info_alter", libraries, theme)
    # Hook data must look the same whether it comes from here or from the cache.
    return {name: dataclasses.replace(library, info=to_json_native(library.info)) for name, library in altered.items()}


def get_libraries(
    ctx: "RequestContext",
    theme: Optional[str] = None,
    reset: bool = False,
) -> Dict[str, LibraryDescriptor]:
    """Return the libraries declared along the trail of ``theme``."""
    theme = theme or ctx.theme
    statics = ctx.statics.get("libraries")
    if reset:
        statics.pop(theme, None)
    elif theme in statics:
        return dict(statics[theme])

    site = ctx.site
    cid = site.cache_id(theme, "libraries")
    libraries: Optional[Dict[str, LibraryDescriptor]] = None
    if not reset:
        entry = site.cache.get(cid)
        if entry is not None and isinstance(entry.data, dict):
            libraries = {name: LibraryDescriptor.from_dict(data) for name, data in entry.data.items()}

    if libraries is None:
        with span("libraries.build", theme=theme):
            libraries = _build_libraries(ctx, theme)
        site.cache.store(cid, {name: library.to_dict() for name, library in libraries.items()})

    statics[theme] = libraries
    return dict(libraries)


__all__ = ["get_libraries", "library_search_paths", "LIBRARIES_MODULE"]

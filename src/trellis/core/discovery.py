"""Plugin definition discovery.

Themes ship plugins as info files named ``<name>.<kind>`` (or the legacy
``<name>.<kind>.inc``) anywhere below the theme directory::

    themes/omega/extensions/layouts/layouts.extension
    themes/omega/layouts/simple/simple.layout
    themes/omega/layouts/legacy/legacy.layout.inc

A base theme's scan never descends into the directory of one of its
sub-themes, so a sub-theme nested inside its base theme keeps its plugins
to itself.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Set

from trellis.core.info import read_info
from trellis.core.models import PluginDefinition
from trellis.core.themes.trail import get_theme_trail
from trellis.core.utils.profiling import count, span

if TYPE_CHECKING:
    from trellis.core.context import RequestContext
    from trellis.core.site import Site

logger = logging.getLogger(__name__)

LEGACY_SUFFIX = ".inc"
# Kinds discovered across every installed theme rather than a trail.
TRAIL_INDEPENDENT_KINDS: FrozenSet[str] = frozenset({"layout"})


def _definition_name(filename: str, kind: str) -> Optional[str]:
    for suffix in (f".{kind}", f".{kind}{LEGACY_SUFFIX}"):
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return filename[: -len(suffix)]
    return None


def scan_directory(root: Path, kind: str, exclude: Optional[Set[Path]] = None) -> Dict[str, Path]:
    """Find ``kind`` definition files below ``root``.

    Args:
        root: Directory to walk.
        kind: Plugin kind (``extension``, ``layout``).
        exclude: Directories that are skipped together with everything below them.

    Returns:
        Mapping of definition name to file path. When both a modern and a
        legacy file define the same name, the modern one wins.
    """
    excluded = {Path(p) for p in exclude or ()}
    found: Dict[str, Path] = {}
    count("discovery.scan")
    if not root.is_dir():
        return found

    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and current / d not in excluded
        )
        for filename in sorted(filenames):
            name = _definition_name(filename, kind)
            if name is None:
                continue
            if name in found and not filename.endswith(LEGACY_SUFFIX):
                found[name] = current / filename
            found.setdefault(name, current / filename)
    return found


def build_exclusion_map(site: "Site") -> Dict[str, Set[Path]]:
    """Map each base theme to the directories of all its (transitive) sub-themes."""
    exclusions: Dict[str, Set[Path]] = {}
    for theme in site.themes.values():
        for base in theme.base_themes:
            exclusions.setdefault(base, set()).add(theme.path)
    return exclusions


def _candidate_themes(ctx: "RequestContext", kind: str, theme: Optional[str]) -> List[str]:
    if theme is None and kind in TRAIL_INDEPENDENT_KINDS:
        themes = ctx.site.themes
        return sorted(themes, key=lambda name: (len(themes[name].base_themes), name))
    return list(get_theme_trail(ctx, theme))


def discover(ctx: "RequestContext", kind: str, theme: Optional[str] = None) -> Dict[str, PluginDefinition]:
    """Discover ``kind`` definitions for ``theme`` (or, for layouts, every theme).

    Definitions from later candidates override earlier ones with the same
    name, so a sub-theme shadows its base theme. Unreadable files are
    skipped. The result is memoized per (theme, kind) for the request.
    """
    if theme is None and kind not in TRAIL_INDEPENDENT_KINDS:
        theme = ctx.theme

    cache = ctx.statics.get("discovery")
    key = (theme, kind)
    if key not in cache:
        with span("discovery.discover", kind=kind, theme=theme):
            cache[key] = _discover(ctx, kind, theme)
    return dict(cache[key])


def _discover(ctx: "RequestContext", kind: str, theme: Optional[str]) -> Dict[str, PluginDefinition]:
    site = ctx.site
    exclusions = build_exclusion_map(site)
    definitions: Dict[str, PluginDefinition] = {}

    for key in _candidate_themes(ctx, kind, theme):
        descriptor = site.themes.get(key)
        if descriptor is None:
            continue
        for name, file in scan_directory(descriptor.path, kind, exclusions.get(key)).items():
            info = read_info(file)
            if info is None:
                logger.debug("Skipping unreadable %s definition %s", kind, file)
                continue
            definitions[name] = PluginDefinition(
                name=name,
                kind=kind,
                path=file.parent,
                file=file,
                theme=key,
                info=info,
            )
    return definitions


__all__ = [
    "discover",
    "scan_directory",
    "build_exclusion_map",
    "TRAIL_INDEPENDENT_KINDS",
    "LEGACY_SUFFIX",
]

"""Extension registry.

Extensions are optional theme features declared in ``<name>.extension``
files. Each one is enabled through the ``toggle_extension_<name>`` theme
setting (falling back to its own ``enabled`` key) and carries an ``errors``
flag when one of its module dependencies is missing or has an incompatible
version::

    name = Layouts
    enabled = TRUE
    dependencies[] = ctools (>=7.x-1.3)
"""
from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from trellis.core.discovery import discover
from trellis.core.hooks import alter
from trellis.core.models import ExtensionDescriptor
from trellis.core.themes.settings import get_setting
from trellis.core.utils.profiling import span
from trellis.core.utils.values import truthy
from trellis.core.versions import check_incompatibility, parse_dependency

if TYPE_CHECKING:
    from trellis.core.context import RequestContext
    from trellis.core.site import Site

logger = logging.getLogger(__name__)

EXTENSION_KIND = "extension"


def dependency_problems(site: "Site", dependencies: Any) -> List[str]:
    """Describe every unmet dependency in ``dependencies`` (empty when all are met)."""
    if isinstance(dependencies, str):
        dependencies = [dependencies]
    if not isinstance(dependencies, list):
        return []

    problems: List[str] = []
    for raw in dependencies:
        dependency = parse_dependency(str(raw))
        if not site.module_enabled(dependency.name):
            problems.append(f"{dependency.name} is not enabled")
            continue
        if not dependency.versions:
            continue
        current = site.module_version(dependency.name) or ""
        incompatible = check_incompatibility(dependency, current)
        if incompatible is not None:
            problems.append(f"{dependency.name}{incompatible} is required, {current or 'unknown'} is installed")
    return problems


def _build_extensions(ctx: "RequestContext", theme: str) -> Dict[str, ExtensionDescriptor]:
    extensions: Dict[str, ExtensionDescriptor] = {}
    for name, definition in discover(ctx, EXTENSION_KIND, theme).items():
        extension = alter(ctx, "extension_info_alter", ExtensionDescriptor.from_definition(definition), theme)

        enabled = truthy(get_setting(ctx, f"toggle_extension_{name}", extension.info.get("enabled"), theme=theme))
        problems = dependency_problems(ctx.site, extension.info.get("dependencies"))
        if problems:
            logger.info("Extension %s of theme %s has unmet dependencies: %s", name, theme, "; ".join(problems))

        extensions[name] = dataclasses.replace(extension, enabled=enabled, errors=bool(problems))
    return extensions


def get_extensions(
    ctx: "RequestContext",
    theme: Optional[str] = None,
    reset: bool = False,
) -> Dict[str, ExtensionDescriptor]:
    """Return the extensions available to ``theme`` (default: the active theme).

    Lookup order is the request cache, the persistent cache, then
    discovery. ``reset`` skips both caches and rebuilds.
    """
    theme = theme or ctx.theme
    statics = ctx.statics.get("extensions")
    if reset:
        statics.pop(theme, None)
        ctx.statics.get("discovery").pop((theme, EXTENSION_KIND), None)
        ctx.statics.reset("extension_enabled")
        ctx.statics.reset("active_layout")
    elif theme in statics:
        return dict(statics[theme])

    site = ctx.site
    cid = site.cache_id(theme, "extensions")
    extensions: Optional[Dict[str, ExtensionDescriptor]] = None
    if not reset:
        entry = site.cache.get(cid)
        if entry is not None and isinstance(entry.data, dict):
            extensions = {name: ExtensionDescriptor.from_dict(data) for name, data in entry.data.items()}

    if extensions is None:
        with span("extensions.build", theme=theme):
            extensions = _build_extensions(ctx, theme)
        site.cache.store(cid, {name: ext.to_dict() for name, ext in extensions.items()})

    statics[theme] = extensions
    return dict(extensions)


def is_extension_enabled(ctx: "RequestContext", name: str, theme: Optional[str] = None) -> bool:
    """True when the extension exists, has no errors, is enabled and not disabled at runtime."""
    theme = theme or ctx.theme
    memo = ctx.statics.get("extension_enabled")
    key = (theme, name)
    if key not in memo:
        extension = get_extensions(ctx, theme).get(name)
        memo[key] = (
            extension is not None
            and not extension.errors
            and extension.enabled
            and not ctx.extension_disabled(name)
        )
    return memo[key]


__all__ = ["get_extensions", "is_extension_enabled", "dependency_problems", "EXTENSION_KIND"]

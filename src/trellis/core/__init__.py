"""Trellis core library.

Typical use::

    from trellis.core import Site, request, get_setting, get_layouts

    site = Site.load("/var/www/site")
    with request(site, theme="corporate") as ctx:
        get_setting(ctx, "toggle_logo")
        get_layouts(ctx)
"""

from . import exceptions  # noqa: F401
from .assets import exclude_assets, get_exclusion_pattern
from .content import get_default_roles, get_node_types, get_views_api
from .context import RequestContext, clear_caches, request
from .discovery import discover
from .extensions import get_extensions, is_extension_enabled
from .hooks import HookRegistry, alter, invoke_all
from .layouts import get_active_layout, get_layouts
from .libraries import get_libraries
from .site import Site
from .themes import get_setting, get_settings, get_theme_trail

__all__ = [
    "exceptions",
    "Site",
    "RequestContext",
    "request",
    "clear_caches",
    "get_theme_trail",
    "get_setting",
    "get_settings",
    "discover",
    "get_extensions",
    "is_extension_enabled",
    "get_layouts",
    "get_active_layout",
    "get_libraries",
    "HookRegistry",
    "invoke_all",
    "alter",
    "get_exclusion_pattern",
    "exclude_assets",
    "get_node_types",
    "get_default_roles",
    "get_views_api",
]

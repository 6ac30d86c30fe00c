"""Per-request resolution context."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Set

from trellis.core.cache import StaticCache

if TYPE_CHECKING:
    from trellis.core.site import Site

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """State for one request against a ``Site``.

    Attributes:
        site: The loaded site.
        theme: Active theme; defaults to the site's default theme.
        trail: Precomputed trail of the active theme (name → label). When
            set it is used verbatim instead of walking base themes.
        statics: Request-scoped memo shared by every registry.
        disabled_extensions: Extensions switched off for this request only.
    """

    site: "Site"
    theme: Optional[str] = None
    trail: Optional[Dict[str, str]] = None
    statics: StaticCache = field(default_factory=StaticCache)
    disabled_extensions: Set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.theme is None:
            self.theme = self.site.default_theme

    def toggle_extension(self, name: str, enabled: bool) -> None:
        """Switch an extension on or off for the rest of this request."""
        if enabled:
            self.disabled_extensions.discard(name)
        else:
            self.disabled_extensions.add(name)
        self.statics.reset("extension_enabled")
        self.statics.reset("active_layout")

    def extension_disabled(self, name: str) -> bool:
        return name in self.disabled_extensions or name in self.site.disabled_extensions


@contextmanager
def request(
    site: "Site",
    theme: Optional[str] = None,
    trail: Optional[Dict[str, str]] = None,
) -> Iterator[RequestContext]:
    """Open a request against ``site``; the request cache is dropped on exit."""
    ctx = RequestContext(site, theme=theme, trail=trail)
    try:
        yield ctx
    finally:
        ctx.statics.reset()


def clear_caches(ctx: RequestContext) -> int:
    """Clear every persistent entry in the site namespace and the request cache.

    Returns the number of persistent entries removed.
    """
    removed = ctx.site.cache.clear(prefix=f"{ctx.site.namespace}:")
    ctx.statics.reset()
    logger.info("Cleared %d cache entr%s under %s:", removed, "y" if removed == 1 else "ies", ctx.site.namespace)
    return removed


__all__ = ["RequestContext", "request", "clear_caches"]

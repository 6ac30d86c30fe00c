"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from trellis.core.log import configure_logging, suppress_lastresort_in_json_mode
from trellis.core.site import Site


def get_site_root(args: argparse.Namespace) -> Optional[Path]:
    """Return the ``--site`` path, or None to auto-detect."""
    site = getattr(args, "site", None)
    return Path(site).expanduser().resolve() if site else None


def setup_logging(site: Site, json_mode: bool) -> None:
    """Configure logging from the site's ``logging`` config section."""
    log_cfg = site.config.get("logging") or {}
    level = str(log_cfg.get("level") or "WARNING")
    log_file = log_cfg.get("file")
    if log_file:
        path = Path(log_file)
        configure_logging(level, path if path.is_absolute() else site.root / path)
    elif json_mode:
        suppress_lastresort_in_json_mode()
    else:
        configure_logging(level)


def get_site(args: argparse.Namespace) -> Site:
    """Load the site selected by ``--site`` and configure logging for it.

    Raises:
        SiteNotFoundError: If no site root can be resolved
        ConfigError: If the site configuration is invalid
    """
    site = Site.load(get_site_root(args))
    setup_logging(site, bool(getattr(args, "json", False)))
    return site


__all__ = ["get_site", "get_site_root", "setup_logging"]

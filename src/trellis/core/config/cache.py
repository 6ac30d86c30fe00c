"""Centralized configuration caching.

Returns the same merged config dict for the same site root as long as the
site config files and TRELLIS_* environment variables are unchanged.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict

from trellis.core.utils.profiling import span

from .manager import ENV_PREFIX, ConfigManager

_config_cache: Dict[str, Dict[str, Any]] = {}


def _cache_key(site_root: Path) -> str:
    """Build a key from the site root, TRELLIS_* env vars and config file stats."""
    base = str(Path(site_root).expanduser().resolve())

    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith(ENV_PREFIX)
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    files = []
    for path in ConfigManager(Path(base)).site_config_paths():
        try:
            st = path.stat()
            files.append((path.name, int(st.st_mtime_ns), int(st.st_size)))
        except OSError:
            files.append((path.name, 0, 0))
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]

    return f"{base}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(site_root: Path, validate: bool = True) -> Dict[str, Any]:
    """Get site configuration with caching.

    NOTE: returns the cached dict instance (treat as immutable).
    """
    key = _cache_key(site_root)
    with span("config.cache.get"):
        if key not in _config_cache:
            with span("config.cache.miss"):
                _config_cache[key] = ConfigManager(Path(site_root)).load_config(validate=validate)
        return _config_cache[key]


def clear_config_cache() -> None:
    """Forget every cached configuration."""
    _config_cache.clear()


def is_cached(site_root: Path) -> bool:
    return _cache_key(site_root) in _config_cache


__all__ = ["get_cached_config", "clear_config_cache", "is_cached"]

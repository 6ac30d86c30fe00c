"""Site configuration loading."""

from .cache import clear_config_cache, get_cached_config, is_cached
from .manager import ENV_PREFIX, SITE_ROOT_ENV, ConfigManager, find_site_root

__all__ = [
    "ConfigManager",
    "find_site_root",
    "get_cached_config",
    "clear_config_cache",
    "is_cached",
    "ENV_PREFIX",
    "SITE_ROOT_ENV",
]

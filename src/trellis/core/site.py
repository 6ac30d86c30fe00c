"""The installed site.

``Site`` holds everything that is shared between requests: the merged
configuration, the installed theme and module registries, the hook
registry and the persistent cache backend. It is built once with
``Site.load`` and treated as read-only afterwards; per-request state lives
in ``trellis.core.context.RequestContext``.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from trellis.core.cache import CacheBackend, create_backend
from trellis.core.config import ConfigManager, find_site_root, get_cached_config
from trellis.core.exceptions import ConfigError, SiteNotFoundError
from trellis.core.hooks import HookRegistry
from trellis.core.info import read_info
from trellis.core.models import ModuleDescriptor, ThemeDescriptor
from trellis.core.themes.trail import find_base_themes
from trellis.core.utils.merge import deep_merge
from trellis.core.utils.profiling import span

logger = logging.getLogger(__name__)

# Machine names of themes and modules.
_MACHINE_NAME_RE = re.compile(r"^[a-z][a-z0-9_]*$")


def _expand_roots(site_root: Path, templates: List[str], config: Mapping[str, Any]) -> List[Path]:
    site_cfg = config.get("site") or {}
    values = {
        "profile": site_cfg.get("profile") or "standard",
        "site_dir": site_cfg.get("site_dir") or "sites/default",
    }
    roots: List[Path] = []
    for template in templates or []:
        try:
            relative = str(template).format(**values)
        except (KeyError, IndexError, ValueError) as exc:
            raise ConfigError(f"Invalid placeholder in path {template!r}", context={"path": template}) from exc
        roots.append(site_root / relative)
    return roots


def _iter_info_files(root: Path) -> Iterator[Path]:
    """Yield ``<name>.info`` files under ``root``, skipping hidden directories."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            stem, ext = os.path.splitext(filename)
            if ext == ".info" and _MACHINE_NAME_RE.match(stem):
                yield Path(dirpath) / filename


def _scan_info(roots: List[Path]) -> Dict[str, Tuple[Path, Dict[str, Any]]]:
    found: Dict[str, Tuple[Path, Dict[str, Any]]] = {}
    for root in roots:
        if not root.is_dir():
            continue
        for info_file in _iter_info_files(root):
            info = read_info(info_file)
            if info is None:
                logger.debug("Skipping unreadable info file %s", info_file)
                continue
            name = info_file.stem
            if name in found:
                logger.debug("%s overrides %s", info_file, found[name][0])
            found[name] = (info_file.parent, info)
    return found


class Site:
    """A loaded site: config, installed themes and modules, hooks and cache."""

    def __init__(
        self,
        root: Path,
        config: Dict[str, Any],
        themes: Dict[str, ThemeDescriptor],
        modules: Dict[str, ModuleDescriptor],
        hooks: Optional[HookRegistry] = None,
        cache: Optional[CacheBackend] = None,
    ) -> None:
        self.root = Path(root)
        self.config = config
        self.themes = themes
        self.modules = modules
        self.hooks = hooks or HookRegistry()
        self.cache = cache or create_backend(config, self.root)

    @classmethod
    def load(cls, root: Optional[Path] = None, config: Optional[Mapping[str, Any]] = None) -> "Site":
        """Load the site rooted at ``root``.

        Args:
            root: Site root directory. When omitted it is resolved from
                ``TRELLIS_SITE_ROOT`` or the nearest ``trellis.yaml``.
            config: Overrides deep-merged on top of the loaded configuration.

        Raises:
            SiteNotFoundError: If the root does not exist or cannot be resolved.
            ConfigError: If the configuration is invalid.
        """
        if root is None:
            site_root = find_site_root()
        else:
            site_root = Path(root).expanduser().resolve()
            if not site_root.is_dir():
                raise SiteNotFoundError(f"Site root not found: {site_root}", context={"path": str(site_root)})

        with span("site.load", root=str(site_root)):
            merged = get_cached_config(site_root)
            if config:
                merged = deep_merge(merged, dict(config))
                ConfigManager(site_root).validate(merged)

            themes = cls._load_themes(site_root, merged)
            modules = cls._load_modules(site_root, merged)
            site = cls(site_root, merged, themes, modules)
            for theme in themes.values():
                site.hooks.load_theme_module(theme)

        logger.info("Loaded site %s: %d theme(s), %d module(s)", site_root, len(themes), len(modules))
        return site

    @staticmethod
    def _load_themes(site_root: Path, config: Mapping[str, Any]) -> Dict[str, ThemeDescriptor]:
        paths = config.get("paths") or {}
        found = _scan_info(_expand_roots(site_root, paths.get("themes") or [], config))

        themes_cfg = config.get("themes") or {}
        enabled: Set[str] = set(themes_cfg.get("enabled") or [])
        if themes_cfg.get("default"):
            enabled.add(themes_cfg["default"])

        declared = {name: info.get("base theme") or None for name, (_, info) in found.items()}
        themes: Dict[str, ThemeDescriptor] = {}
        for name in sorted(found):
            path, info = found[name]
            themes[name] = ThemeDescriptor(
                name=name,
                label=str(info.get("name") or name),
                path=path,
                info=info,
                base_theme=declared[name],
                base_themes=tuple(find_base_themes(declared, name)),
                enabled=name in enabled,
            )
        return themes

    @staticmethod
    def _load_modules(site_root: Path, config: Mapping[str, Any]) -> Dict[str, ModuleDescriptor]:
        paths = config.get("paths") or {}
        found = _scan_info(_expand_roots(site_root, paths.get("modules") or [], config))

        enabled_cfg = (config.get("modules") or {}).get("enabled")
        modules: Dict[str, ModuleDescriptor] = {}
        for name in sorted(found):
            path, info = found[name]
            modules[name] = ModuleDescriptor(
                name=name,
                path=path,
                version=str(info.get("version") or ""),
                info=info,
                enabled=enabled_cfg is None or name in enabled_cfg,
            )
        return modules

    # ---------- configuration accessors ----------

    @property
    def namespace(self) -> str:
        return str((self.config.get("cache") or {}).get("namespace") or "trellis")

    @property
    def default_theme(self) -> Optional[str]:
        return (self.config.get("themes") or {}).get("default")

    @property
    def profile(self) -> str:
        return str((self.config.get("site") or {}).get("profile") or "standard")

    @property
    def site_dir(self) -> str:
        return str((self.config.get("site") or {}).get("site_dir") or "sites/default")

    @property
    def global_settings(self) -> Dict[str, Any]:
        return dict((self.config.get("settings") or {}).get("global") or {})

    def saved_settings(self, theme: str) -> Dict[str, Any]:
        saved = ((self.config.get("settings") or {}).get("themes") or {}).get(theme)
        return dict(saved) if isinstance(saved, dict) else {}

    @property
    def disabled_extensions(self) -> Set[str]:
        return set((self.config.get("extensions") or {}).get("disabled") or [])

    def library_paths(self) -> Dict[str, str]:
        """Library locations registered with the ``libraries`` module facility."""
        return dict((self.config.get("libraries") or {}).get("paths") or {})

    # ---------- module registry ----------

    def module_enabled(self, name: str) -> bool:
        module = self.modules.get(name)
        return module is not None and module.enabled

    def module_version(self, name: str) -> Optional[str]:
        module = self.modules.get(name)
        return module.version if module is not None else None

    def cache_id(self, *parts: Any) -> str:
        """Build a namespaced persistent cache id: ``<ns>:<part>:<part>``."""
        return ":".join([self.namespace, *(str(p) for p in parts)])

    def __repr__(self) -> str:
        return f"Site(root={str(self.root)!r}, themes={len(self.themes)}, modules={len(self.modules)})"


__all__ = ["Site"]

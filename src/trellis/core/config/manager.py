"""
Trellis site configuration management (YAML layers + environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml

from trellis.core.exceptions import ConfigError, SiteNotFoundError
from trellis.core.schemas import SchemaValidationError, validate_payload
from trellis.core.utils.io import read_yaml
from trellis.core.utils.merge import deep_merge as _deep_merge
from trellis.core.utils.profiling import span
from trellis.data import get_data_path

logger = logging.getLogger(__name__)

SITE_CONFIG_NAMES: Tuple[str, ...] = ("trellis.yaml", "trellis.yml")
SITE_LOCAL_CONFIG_NAMES: Tuple[str, ...] = ("trellis.local.yaml", "trellis.local.yml")
ENV_PREFIX = "TRELLIS_"
SITE_ROOT_ENV = "TRELLIS_SITE_ROOT"
# Environment variables with the prefix that are not configuration keys.
_RESERVED_ENV = frozenset({SITE_ROOT_ENV})


def find_site_root(start: Optional[Path] = None) -> Path:
    """Resolve the site root.

    Resolution priority:
    1. TRELLIS_SITE_ROOT environment variable
    2. Nearest ancestor of ``start`` (default: CWD) holding trellis.yaml

    Raises:
        SiteNotFoundError: If no site root can be resolved
    """
    env_root = os.environ.get(SITE_ROOT_ENV)
    if env_root:
        path = Path(env_root).expanduser().resolve()
        if not path.is_dir():
            raise SiteNotFoundError(
                f"{SITE_ROOT_ENV} points at missing directory: {path}",
                context={"path": str(path)},
            )
        return path

    cwd = (start or Path.cwd()).resolve()
    for candidate in (cwd, *cwd.parents):
        if any((candidate / name).is_file() for name in SITE_CONFIG_NAMES):
            return candidate

    raise SiteNotFoundError(
        f"No trellis.yaml found in {cwd} or its parents; pass --site or set {SITE_ROOT_ENV}.",
        context={"cwd": str(cwd)},
    )


class ConfigManager:
    """Load, merge, and validate site configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: TRELLIS_<section>__<key>
    2. Site-local config: <site>/trellis.local.yaml (uncommitted)
    3. Site config: <site>/trellis.yaml
    4. Bundled defaults: trellis.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, site_root: Optional[Path] = None) -> None:
        self.site_root = Path(site_root).resolve() if site_root else find_site_root()
        self.core_config_dir = get_data_path("config")

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        # Fail closed: configuration must never silently ignore invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {path}", context={"path": str(path)})
        return data

    def site_config_paths(self) -> List[Path]:
        """Return existing site config files in low→high precedence order."""
        paths: List[Path] = []
        for names in (SITE_CONFIG_NAMES, SITE_LOCAL_CONFIG_NAMES):
            for name in names:
                candidate = self.site_root / name
                if candidate.is_file():
                    paths.append(candidate)
                    break
        return paths

    # ---------- environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segments = [seg.lower() for seg in raw.split("__")]
            if not raw or any(seg == "" for seg in segments):
                raise ConfigError(f"Malformed {ENV_PREFIX}* key: {key}", context={"key": key})
            yield segments, self._coerce_type(os.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, value in self._iter_env_overrides():
            node = cfg
            for part in path[:-1]:
                child = node.get(part)
                if not isinstance(child, dict):
                    child = {}
                    node[part] = child
                node = child
            node[path[-1]] = value

    # ---------- loading ----------

    def _load_directory(self, directory: Path, cfg: Dict[str, Any]) -> Dict[str, Any]:
        if not directory.exists():
            return cfg
        for path in sorted(directory.glob("*.yaml")):
            cfg = self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all layers.

        Raises:
            ConfigError: On invalid YAML, malformed env keys or schema violations.
        """
        with span("config.load_config", validate=validate):
            cfg = self._load_directory(self.core_config_dir, {})
            for path in self.site_config_paths():
                logger.debug("Merging site config %s", path)
                cfg = self.deep_merge(cfg, self.load_yaml(path))
            self.apply_env_overrides(cfg)

            if validate:
                self.validate(cfg)
            return cfg

    def validate(self, cfg: Dict[str, Any]) -> None:
        try:
            validate_payload(cfg, "site.schema")
        except SchemaValidationError as exc:
            raise ConfigError(str(exc), context={"errors": exc.errors}) from exc

    def get(self, key: str, default: Any = None) -> Any:
        """Return a dot-notation key from the merged configuration."""
        node: Any = self.load_config(validate=False)
        for part in [p for p in key.split(".") if p]:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node


__all__ = ["ConfigManager", "find_site_root", "ENV_PREFIX", "SITE_ROOT_ENV"]

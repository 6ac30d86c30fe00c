"""Theme hook registry.

Themes contribute behaviour through plain functions. A theme directory may
ship a ``template.py`` module; every public function defined in it is
registered under its own name as that theme's implementation of the hook::

    # themes/sub/template.py
    def libraries_info():
        return {"html5shiv": {"name": "HTML5 Shiv", "files": {"js": ["html5shiv.js"]}}}

    def layout_alter(name, theme):
        return "wide" if name == "simple" else name

Code outside themes registers implementations with ``register`` and alter
listeners with ``add_alter``.

Invocation comes in two shapes:

- ``invoke_all`` calls each trail theme's implementation in trail order and
  merges the results.
- ``alter`` folds a value through the global listeners and then each trail
  theme's implementation: ``value = listener(value, theme)``. A listener
  returning None keeps the previous value.
"""
from __future__ import annotations

import importlib.util
import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional

from trellis.core.themes.trail import get_theme_trail
from trellis.core.utils.merge import merge_recursive
from trellis.core.utils.profiling import span

if TYPE_CHECKING:
    from trellis.core.context import RequestContext
    from trellis.core.models import ThemeDescriptor

logger = logging.getLogger(__name__)

THEME_MODULE = "template.py"
# Key under which non-mapping hook results are collected.
RESULTS_KEY = "_results"

Hook = Callable[..., Any]


class HookRegistry:
    """Hook implementations per theme plus ordered alter listeners."""

    def __init__(self) -> None:
        self._implementations: Dict[str, Dict[str, Hook]] = {}
        self._alters: Dict[str, List[Hook]] = {}

    def register(self, theme: str, hook: str, fn: Hook) -> None:
        self._implementations.setdefault(theme, {})[hook] = fn

    def implementation(self, theme: str, hook: str) -> Optional[Hook]:
        return self._implementations.get(theme, {}).get(hook)

    def implements(self, theme: str, hook: str) -> bool:
        return self.implementation(theme, hook) is not None

    def hooks_for(self, theme: str) -> List[str]:
        return sorted(self._implementations.get(theme, {}))

    def add_alter(self, hook: str, fn: Hook) -> None:
        self._alters.setdefault(hook, []).append(fn)

    def alter_listeners(self, hook: str, trail: Mapping[str, str]) -> List[Hook]:
        listeners = list(self._alters.get(hook, []))
        for theme in trail:
            fn = self.implementation(theme, hook)
            if fn is not None:
                listeners.append(fn)
        return listeners

    def load_theme_module(self, theme: "ThemeDescriptor") -> int:
        """Register the public functions of a theme's ``template.py``.

        Returns the number of hooks registered. A module that fails to import
        is logged and skipped.
        """
        module_path = theme.path / THEME_MODULE
        if not module_path.is_file():
            return 0

        spec = importlib.util.spec_from_file_location(f"trellis_theme_{theme.name}", module_path)
        if spec is None or spec.loader is None:
            return 0
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            logger.warning("Could not load hooks for theme %s from %s: %s", theme.name, module_path, exc)
            return 0

        registered = 0
        for name, obj in inspect.getmembers(module, inspect.isfunction):
            if name.startswith("_") or obj.__module__ != module.__name__:
                continue
            self.register(theme.name, name, obj)
            registered += 1
        logger.debug("Registered %d hook(s) for theme %s", registered, theme.name)
        return registered


def _tag_items(result: Mapping[str, Any], theme: str) -> Dict[str, Any]:
    tagged: Dict[str, Any] = {}
    for key, item in result.items():
        if isinstance(item, Mapping):
            tagged[key] = {**item, "theme": theme}
        else:
            tagged[key] = item
    return tagged


def invoke_all(ctx: "RequestContext", hook: str, theme: Optional[str] = None, *args: Any) -> Dict[str, Any]:
    """Invoke ``hook`` for every theme in the trail and merge the results.

    Mapping results have each item tagged with its origin theme and are
    merged with ``merge_recursive``: nested mappings recurse, scalars are
    last-writer-wins and lists are concatenated. Other non-None results are
    appended to ``result["_results"]``.
    """
    theme = theme or ctx.theme
    registry = ctx.site.hooks
    merged: Dict[str, Any] = {}
    with span("hooks.invoke_all", hook=hook, theme=theme):
        for key in get_theme_trail(ctx, theme):
            fn = registry.implementation(key, hook)
            if fn is None:
                continue
            result = fn(*args)
            if isinstance(result, Mapping):
                merged = merge_recursive(merged, _tag_items(result, key))
            elif result is not None:
                merged.setdefault(RESULTS_KEY, []).append(result)
    return merged


def alter(ctx: "RequestContext", hook: str, value: Any, theme: Optional[str] = None) -> Any:
    """Fold ``value`` through every listener of ``hook``."""
    theme = theme or ctx.theme
    trail = get_theme_trail(ctx, theme)
    with span("hooks.alter", hook=hook, theme=theme):
        for listener in ctx.site.hooks.alter_listeners(hook, trail):
            altered = listener(value, theme)
            if altered is not None:
                value = altered
    return value


__all__ = ["HookRegistry", "invoke_all", "alter", "THEME_MODULE", "RESULTS_KEY"]

"""Descriptor models.

Every descriptor is a frozen dataclass. Registries hand them to alter
listeners, which return modified copies (``dataclasses.replace``) instead
of mutating them. ``to_dict``/``from_dict`` round-trip through the JSON
persistent cache.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ThemeDescriptor:
    """An installed theme as the site registry sees it."""

    name: str
    label: str
    path: Path
    info: Dict[str, Any] = field(default_factory=dict)
    base_theme: Optional[str] = None
    # Ancestors, deepest base first. Empty for a root theme.
    base_themes: Tuple[str, ...] = ()
    enabled: bool = False

    @property
    def info_file(self) -> Path:
        return self.path / f"{self.name}.info"


@dataclass(frozen=True)
class ModuleDescriptor:
    name: str
    path: Path
    version: str = ""
    info: Dict[str, Any] = field(default_factory=dict)
    enabled: bool = False


@dataclass(frozen=True)
class PluginDefinition:
    """A definition file found by discovery (one extension or layout)."""

    name: str
    kind: str
    path: Path
    file: Path
    theme: str
    info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "path": str(self.path),
            "file": str(self.file),
            "theme": self.theme,
            "info": self.info,
        }


@dataclass(frozen=True)
class ExtensionDescriptor:
    name: str
    path: Path
    file: Path
    theme: str
    info: Dict[str, Any] = field(default_factory=dict)
    enabled: bool = False
    errors: bool = False

    @classmethod
    def from_definition(cls, definition: PluginDefinition) -> "ExtensionDescriptor":
        return cls(
            name=definition.name,
            path=definition.path,
            file=definition.file,
            theme=definition.theme,
            info=dict(definition.info),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "file": str(self.file),
            "theme": self.theme,
            "info": self.info,
            "enabled": self.enabled,
            "errors": self.errors,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ExtensionDescriptor":
        return cls(
            name=payload["name"],
            path=Path(payload["path"]),
            file=Path(payload["file"]),
            theme=payload["theme"],
            info=dict(payload.get("info") or {}),
            enabled=bool(payload.get("enabled", False)),
            errors=bool(payload.get("errors", False)),
        )


@dataclass(frozen=True)
class LayoutAsset:
    """A stylesheet or script attached to a layout."""

    path: Path
    type: str
    media: Optional[str] = None
    group: str = "theme"
    weight: int = -10

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "type": self.type,
            "media": self.media,
            "group": self.group,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LayoutAsset":
        return cls(
            path=Path(payload["path"]),
            type=payload["type"],
            media=payload.get("media"),
            group=payload.get("group", "theme"),
            weight=int(payload.get("weight", -10)),
        )


@dataclass(frozen=True)
class LayoutDescriptor:
    name: str
    path: Path
    file: Path
    theme: str
    template: str
    info: Dict[str, Any] = field(default_factory=dict)
    attached: Tuple[LayoutAsset, ...] = ()

    @property
    def stylesheets(self) -> List[LayoutAsset]:
        return [a for a in self.attached if a.type == "css"]

    @property
    def scripts(self) -> List[LayoutAsset]:
        return [a for a in self.attached if a.type == "js"]

    @property
    def regions(self) -> Dict[str, str]:
        regions = self.info.get("regions")
        return dict(regions) if isinstance(regions, dict) else {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "file": str(self.file),
            "theme": self.theme,
            "template": self.template,
            "info": self.info,
            "attached": [a.to_dict() for a in self.attached],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LayoutDescriptor":
        return cls(
            name=payload["name"],
            path=Path(payload["path"]),
            file=Path(payload["file"]),
            theme=payload["theme"],
            template=payload["template"],
            info=dict(payload.get("info") or {}),
            attached=tuple(LayoutAsset.from_dict(a) for a in payload.get("attached") or []),
        )


@dataclass(frozen=True)
class LibraryDescriptor:
    name: str
    path: Optional[Path]
    theme: Optional[str]
    info: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path) if self.path is not None else None,
            "theme": self.theme,
            "info": self.info,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LibraryDescriptor":
        raw_path = payload.get("path")
        return cls(
            name=payload["name"],
            path=Path(raw_path) if raw_path else None,
            theme=payload.get("theme"),
            info=dict(payload.get("info") or {}),
        )


__all__ = [
    "ThemeDescriptor",
    "ModuleDescriptor",
    "PluginDefinition",
    "ExtensionDescriptor",
    "LayoutAsset",
    "LayoutDescriptor",
    "LibraryDescriptor",
]

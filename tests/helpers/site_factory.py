"""Build throwaway site trees for tests.

Example:
    factory = SiteFactory(tmp_path)
    factory.theme("base")
    factory.theme("sub", base="base")
    factory.configure(themes={"default": "sub"})
    site = factory.load()
"""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from trellis.core.site import Site
from trellis.core.utils.merge import deep_merge


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
    return path


class SiteFactory:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)
        self.config: Dict[str, Any] = {}
        self.theme_dirs: Dict[str, Path] = {}

    def configure(self, **sections: Any) -> "SiteFactory":
        """Deep-merge ``sections`` into trellis.yaml."""
        self.config = deep_merge(self.config, sections)
        write(self.root / "trellis.yaml", yaml.safe_dump(self.config, sort_keys=True))
        return self

    def theme(
        self,
        name: str,
        *,
        base: Optional[str] = None,
        label: Optional[str] = None,
        body: str = "",
        directory: Optional[Path] = None,
    ) -> Path:
        """Write ``<directory>/<name>.info`` (default directory: themes/<name>)."""
        theme_dir = directory or self.root / "themes" / name
        lines = [f"name = {label or name.title()}", "core = 7.x"]
        if base:
            lines.append(f"base theme = {base}")
        write(theme_dir / f"{name}.info", "\n".join(lines) + "\n" + textwrap.dedent(body).lstrip("\n"))
        self.theme_dirs[name] = theme_dir
        return theme_dir

    def module(self, name: str, version: str = "7.x-1.0") -> Path:
        module_dir = self.root / "sites" / "all" / "modules" / name
        write(module_dir / f"{name}.info", f"name = {name.title()}\ncore = 7.x\nversion = \"{version}\"\n")
        return module_dir

    def extension(self, theme: str, name: str, body: str = "", *, legacy: bool = False) -> Path:
        suffix = ".extension.inc" if legacy else ".extension"
        return write(self.theme_dirs[theme] / "extensions" / name / f"{name}{suffix}", body or f"name = {name.title()}\n")

    def layout(self, theme: str, name: str, body: str = "", *, legacy: bool = False) -> Path:
        suffix = ".layout.inc" if legacy else ".layout"
        return write(self.theme_dirs[theme] / "layouts" / name / f"{name}{suffix}", body or f"name = {name.title()}\n")

    def hooks(self, theme: str, source: str) -> Path:
        return write(self.theme_dirs[theme] / "template.py", source)

    def file(self, relative: str, content: str = "") -> Path:
        return write(self.root / relative, content)

    def load(self, **overrides: Any) -> Site:
        if not (self.root / "trellis.yaml").exists():
            self.configure()
        return Site.load(self.root, config=overrides or None)


__all__ = ["SiteFactory", "write"]

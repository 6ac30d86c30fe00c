"""Theme trails and layered theme settings."""

from .settings import get_setting, get_settings
from .trail import find_base_themes, get_theme_trail

__all__ = ["find_base_themes", "get_theme_trail", "get_setting", "get_settings"]

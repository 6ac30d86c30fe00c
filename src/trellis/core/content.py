"""Static content definitions exported with the site.

These are declarations only (content types, default roles, views API
level); nothing here talks to a database.
"""
from __future__ import annotations

import copy
from typing import Any, Dict

from trellis.data import read_yaml

CONTENT_FILE = "content.yaml"


def _section(name: str) -> Dict[str, Any]:
    return copy.deepcopy(read_yaml("content", CONTENT_FILE).get(name) or {})


def get_node_types() -> Dict[str, Dict[str, Any]]:
    """Return the ``article`` and ``page`` content type definitions."""
    return _section("node_types")


def get_default_roles() -> Dict[str, Dict[str, Any]]:
    return _section("user_roles")


def get_views_api() -> Dict[str, Any]:
    return _section("views_api")


__all__ = ["get_node_types", "get_default_roles", "get_views_api"]

from __future__ import annotations

from trellis.core.utils.merge import deep_merge, merge_arrays, merge_recursive
from trellis.core.utils.values import is_empty, truthy


def test_deep_merge_does_not_mutate_inputs() -> None:
    base = {"a": {"x": 1, "y": [1, 2]}, "b": [1, 2, 3], "c": 1}
    override = {"a": {"y": ["+", 3, 4]}, "b": ["=", 9], "c": 2, "d": "new"}

    merged = deep_merge(base, override)

    assert merged == {"a": {"x": 1, "y": [1, 2, 3, 4]}, "b": [9], "c": 2, "d": "new"}
    assert base["a"]["y"] == [1, 2]
    assert base["b"] == [1, 2, 3]


def test_merge_arrays_replaces_by_default() -> None:
    assert merge_arrays([1, 2], [3]) == [3]
    assert merge_arrays([1, 2], []) == [1, 2]


def test_merge_recursive_accumulates_lists_and_overrides_scalars() -> None:
    first = {"html5shiv": {"name": "HTML5 Shiv", "files": {"js": ["a.js"]}, "theme": "base"}}
    second = {"html5shiv": {"files": {"js": ["b.js"]}, "theme": "sub"}, "respond": {"name": "Respond"}}

    merged = merge_recursive(first, second)

    assert merged["html5shiv"] == {"name": "HTML5 Shiv", "files": {"js": ["a.js", "b.js"]}, "theme": "sub"}
    assert merged["respond"] == {"name": "Respond"}
    assert first["html5shiv"]["files"]["js"] == ["a.js"]


def test_info_truthiness() -> None:
    for value in (None, False, 0, 0.0, "", "0", [], {}):
        assert is_empty(value)
    for value in (True, 1, "1", "FALSE", "no", ["x"], {"a": 1}):
        assert truthy(value)

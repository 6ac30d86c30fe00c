"""Dependency declarations and version compatibility checks.

Extensions declare dependencies on site modules in their info files::

    dependencies[] = views
    dependencies[] = ctools (>=7.x-1.3, <2.x)

A dependency is satisfied when the module is enabled and its installed
version falls inside every declared constraint. Versions compare the way
the site's release tooling orders them: numeric parts numerically, and the
words ``dev < alpha < beta < RC < <number> < pl`` between them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

CORE_COMPATIBILITY = "7.x"

_DEPENDENCY_RE = re.compile(
    r"^\s*(?P<operation>!=|==|=|<>|<=|<|>=|>)?\s*"
    r"(?:" + re.escape(CORE_COMPATIBILITY) + r"-)?"
    r"(?P<major>\d+)\.(?P<minor>(?:\d+|x)(?:-[A-Za-z]+\d+)?)"
)

# Word order for version parts. Unknown words sort below all of these.
_SPECIAL_FORMS: Tuple[Tuple[str, int], ...] = (
    ("dev", 0),
    ("alpha", 1),
    ("a", 1),
    ("beta", 2),
    ("b", 2),
    ("RC", 3),
    ("rc", 3),
    ("#", 4),
    ("pl", 5),
    ("p", 5),
)
_NUMBER_FORM = "#N#"


@dataclass(frozen=True)
class VersionConstraint:
    op: str
    version: str


@dataclass(frozen=True)
class Dependency:
    """A parsed ``name (constraints)`` declaration."""

    name: str
    original_version: str = ""
    versions: Tuple[VersionConstraint, ...] = field(default_factory=tuple)


def parse_dependency(raw: str) -> Dependency:
    """Parse a dependency declaration.

    Example:
        >>> dep = parse_dependency("bar (>=7.x-2.0, <3.x)")
        >>> dep.name, [(v.op, v.version) for v in dep.versions]
        ('bar', [('>=', '2.0'), ('<', '3.x')])
    """
    name, sep, rest = raw.partition("(")
    if not sep:
        return Dependency(name=name.strip())

    constraints: List[VersionConstraint] = []
    for part in rest.split(","):
        match = _DEPENDENCY_RE.match(part)
        if not match:
            continue
        op = match.group("operation") or "="
        major = int(match.group("major"))
        minor = match.group("minor")
        if minor == "x":
            # "2.x" means the whole 2 branch.
            if op in (">", "<="):
                major += 1
            if op in ("=", "=="):
                constraints.append(VersionConstraint("<", f"{major + 1}.x"))
                op = ">="
        constraints.append(VersionConstraint(op, f"{major}.{minor}"))

    return Dependency(
        name=name.strip(),
        original_version=f" ({rest}",
        versions=tuple(constraints),
    )


def normalize_version(version: str) -> str:
    """Strip the core compatibility prefix and a development suffix.

    Example:
        >>> normalize_version("7.x-2.1-dev")
        '2.1'
    """
    version = str(version).strip()
    prefix = f"{CORE_COMPATIBILITY}-"
    if version.startswith(prefix):
        version = version[len(prefix):]
    return re.sub(r"-dev$", "", version)


def _canonicalize(version: str) -> List[str]:
    parts: List[str] = []
    current = ""
    for ch in version:
        if ch.isalnum():
            if current and current[-1].isdigit() != ch.isdigit():
                parts.append(current)
                current = ""
            current += ch
        else:
            if current:
                parts.append(current)
            current = ""
    if current:
        parts.append(current)
    return parts


def _special_order(form: str) -> int:
    for name, order in _SPECIAL_FORMS:
        if form.startswith(name):
            return order
    return -6


def _compare_special(a: str, b: str) -> int:
    left, right = _special_order(a), _special_order(b)
    return (left > right) - (left < right)


def _compare_parts(left: List[str], right: List[str]) -> int:
    for a, b in zip(left, right):
        if a.isdigit() and b.isdigit():
            result = (int(a) > int(b)) - (int(a) < int(b))
        elif not a.isdigit() and not b.isdigit():
            result = _compare_special(a, b)
        elif a.isdigit():
            result = _compare_special(_NUMBER_FORM, b)
        else:
            result = _compare_special(a, _NUMBER_FORM)
        if result:
            return result

    if len(left) > len(right):
        rest = left[len(right)]
        return 1 if rest.isdigit() else _compare_parts(left[len(right):], [_NUMBER_FORM])
    if len(right) > len(left):
        rest = right[len(left)]
        return -1 if rest.isdigit() else _compare_parts([_NUMBER_FORM], right[len(left):])
    return 0


def version_compare(a: str, b: str) -> int:
    """Return -1, 0 or 1 as ``a`` sorts before, equal to or after ``b``.

    Example:
        >>> version_compare("1.5", "2.0"), version_compare("2.0", "2.x")
        (-1, 1)
        >>> version_compare("2.0-beta1", "2.0")
        -1
    """
    if not a or not b:
        return (bool(a) > bool(b)) - (bool(a) < bool(b))
    return _compare_parts(_canonicalize(a), _canonicalize(b))


def satisfies(version: str, constraint: VersionConstraint) -> bool:
    result = version_compare(version, constraint.version)
    op = constraint.op
    if op in ("=", "=="):
        return result == 0
    if op in ("!=", "<>"):
        return result != 0
    if op == "<":
        return result < 0
    if op == "<=":
        return result <= 0
    if op == ">":
        return result > 0
    if op == ">=":
        return result >= 0
    raise ValueError(f"Unsupported version operation: {op!r}")


def check_incompatibility(dependency: Dependency, current_version: str) -> Optional[str]:
    """Return the declared version string when ``current_version`` misses it."""
    current = normalize_version(current_version)
    for constraint in dependency.versions:
        if not satisfies(current, constraint):
            return dependency.original_version
    return None


__all__ = [
    "CORE_COMPATIBILITY",
    "Dependency",
    "VersionConstraint",
    "parse_dependency",
    "normalize_version",
    "version_compare",
    "satisfies",
    "check_incompatibility",
]

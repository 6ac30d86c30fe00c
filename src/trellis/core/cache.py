"""Request-scoped and persistent caches.

Two tiers sit in front of every registry:

- ``StaticCache`` lives for one request. It is created with each
  ``RequestContext`` and thrown away with it.
- ``CacheBackend`` is shared by every request against a site. Entries are
  JSON payloads keyed by namespaced cache ids (``trellis:<theme>:extensions``).
  There is no locking: concurrent writers race and the last one wins, which
  is fine because every entry is recomputed deterministically.
"""
from __future__ import annotations

import hashlib
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

from trellis.core.exceptions import CacheError
from trellis.core.utils.io import ensure_directory, read_json, write_json_atomic

logger = logging.getLogger(__name__)

# Never expires; removed only by an explicit clear.
CACHE_PERMANENT = 0
# Dropped by a general clear and once older than the temporary lifetime.
CACHE_TEMPORARY = -1


class StaticCache:
    """Namespaced per-request memo."""

    def __init__(self) -> None:
        self._data: Dict[str, Dict[Any, Any]] = {}

    def get(self, namespace: str) -> Dict[Any, Any]:
        """Return the (mutable) store for ``namespace``, creating it on first use."""
        return self._data.setdefault(namespace, {})

    def reset(self, namespace: Optional[str] = None) -> None:
        if namespace is None:
            self._data.clear()
        else:
            self._data.pop(namespace, None)

    def __contains__(self, namespace: str) -> bool:
        return namespace in self._data


@dataclass(frozen=True)
class CacheEntry:
    cid: str
    data: Any
    created: float
    expire: float = CACHE_PERMANENT

    def to_dict(self) -> Dict[str, Any]:
        return {"cid": self.cid, "data": self.data, "created": self.created, "expire": self.expire}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CacheEntry":
        return cls(
            cid=str(payload["cid"]),
            data=payload.get("data"),
            created=float(payload.get("created", 0)),
            expire=float(payload.get("expire", CACHE_PERMANENT)),
        )


class CacheBackend(ABC):
    """Persistent cache shared across requests."""

    def __init__(self, *, temporary_lifetime: int = 300, clock: Callable[[], float] = time.time) -> None:
        self.temporary_lifetime = temporary_lifetime
        self._clock = clock

    # Storage primitives implemented by subclasses.

    @abstractmethod
    def _read(self, cid: str) -> Optional[CacheEntry]:
        ...

    @abstractmethod
    def _write(self, entry: CacheEntry) -> None:
        ...

    @abstractmethod
    def _remove(self, cid: str) -> None:
        ...

    @abstractmethod
    def _iter_entries(self) -> Iterator[CacheEntry]:
        ...

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        if entry.expire == CACHE_PERMANENT:
            return False
        if entry.expire == CACHE_TEMPORARY:
            return entry.created + self.temporary_lifetime < now
        return entry.expire < now

    def get(self, cid: str) -> Optional[CacheEntry]:
        entry = self._read(cid)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            logger.debug("Cache entry %s expired", cid)
            return None
        return entry

    def set(self, cid: str, data: Any, expire: float = CACHE_PERMANENT) -> None:
        self._write(CacheEntry(cid=cid, data=data, created=self._clock(), expire=expire))

    def store(self, cid: str, data: Any, expire: float = CACHE_PERMANENT) -> bool:
        """Like ``set``, but a failed write is logged and reported as False."""
        try:
            self.set(cid, data, expire)
        except CacheError as exc:
            logger.warning("Not caching %s: %s", cid, exc)
            return False
        return True

    def delete(self, cid: str) -> None:
        self._remove(cid)

    def clear(self, prefix: Optional[str] = None) -> int:
        """Clear entries and return how many were removed.

        With a ``prefix``, every entry whose id starts with it goes. Without
        one, only temporary and expired entries are dropped.
        """
        now = self._clock()
        removed = 0
        for entry in list(self._iter_entries()):
            if prefix is not None:
                doomed = entry.cid.startswith(prefix)
            else:
                doomed = entry.expire != CACHE_PERMANENT and (
                    entry.expire == CACHE_TEMPORARY or entry.expire < now
                )
            if doomed:
                self._remove(entry.cid)
                removed += 1
        return removed

    def garbage_collect(self) -> int:
        """Drop entries that are already past their lifetime."""
        now = self._clock()
        removed = 0
        for entry in list(self._iter_entries()):
            if self._is_expired(entry, now):
                self._remove(entry.cid)
                removed += 1
        return removed


class MemoryCacheBackend(CacheBackend):
    """In-process backend, shared by requests made through the same Site."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._entries: Dict[str, CacheEntry] = {}

    def _read(self, cid: str) -> Optional[CacheEntry]:
        return self._entries.get(cid)

    def _write(self, entry: CacheEntry) -> None:
        self._entries[entry.cid] = entry

    def _remove(self, cid: str) -> None:
        self._entries.pop(cid, None)

    def _iter_entries(self) -> Iterator[CacheEntry]:
        return iter(list(self._entries.values()))


class FileCacheBackend(CacheBackend):
    """One JSON file per entry under ``directory``."""

    def __init__(self, directory: Path, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.directory = Path(directory)

    def _path(self, cid: str) -> Path:
        digest = hashlib.sha256(cid.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    def _load(self, path: Path) -> Optional[CacheEntry]:
        try:
            payload = read_json(path, default=None)
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable cache file %s: %s", path, exc)
            return None
        if not isinstance(payload, dict) or "cid" not in payload:
            return None
        return CacheEntry.from_dict(payload)

    def _read(self, cid: str) -> Optional[CacheEntry]:
        entry = self._load(self._path(cid))
        if entry is not None and entry.cid != cid:
            return None
        return entry

    def _write(self, entry: CacheEntry) -> None:
        try:
            ensure_directory(self.directory)
            write_json_atomic(self._path(entry.cid), entry.to_dict())
        except (OSError, TypeError, ValueError) as exc:
            raise CacheError(
                f"Unable to write cache entry {entry.cid}: {exc}",
                context={"cid": entry.cid, "directory": str(self.directory)},
            ) from exc

    def _remove(self, cid: str) -> None:
        try:
            self._path(cid).unlink()
        except FileNotFoundError:
            pass

    def _iter_entries(self) -> Iterator[CacheEntry]:
        if not self.directory.is_dir():
            return
        for path in sorted(self.directory.glob("*.json")):
            entry = self._load(path)
            if entry is not None:
                yield entry


def create_backend(config: Dict[str, Any], site_root: Path) -> CacheBackend:
    """Build the persistent backend described by the ``cache`` config section."""
    cache_cfg = config.get("cache") or {}
    lifetime = int(cache_cfg.get("temporary_lifetime", 300))
    backend = cache_cfg.get("backend", "file")
    if backend == "memory":
        return MemoryCacheBackend(temporary_lifetime=lifetime)
    directory = Path(cache_cfg.get("directory") or ".trellis/cache")
    if not directory.is_absolute():
        directory = site_root / directory
    return FileCacheBackend(directory, temporary_lifetime=lifetime)


__all__ = [
    "CACHE_PERMANENT",
    "CACHE_TEMPORARY",
    "StaticCache",
    "CacheEntry",
    "CacheBackend",
    "MemoryCacheBackend",
    "FileCacheBackend",
    "create_backend",
]

"""Content-hash validated read-through cache for repository file access."""

from __future__ import annotations

import hashlib
import json
import os
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..walker import IgnoreRule, iter_files

DEFAULT_TTL = 5 * 60.0


@dataclass
class CacheEntry:
    """Cached value plus the file fingerprint it was derived from."""

    value: Any
    digest: str
    size: int
    mtime_ns: int
    stored_at: float


class FileCache:
    """In-memory store keyed by ``<kind>:<path>`` with a time-to-live.

    Each scanner owns its own instance; tests create a fresh one per case.
    """

    def __init__(
        self, ttl: float = DEFAULT_TTL, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if self._clock() - entry.stored_at >= self.ttl:
                self._entries.pop(key, None)
                self.misses += 1
                return None
            self.hits += 1
            return entry

    def set(
        self, key: str, value: Any, *, digest: str, size: int = -1, mtime_ns: int = -1
    ) -> None:
        entry = CacheEntry(
            value=value,
            digest=digest,
            size=size,
            mtime_ns=mtime_ns,
            stored_at=self._clock(),
        )
        with self._lock:
            self._entries[key] = entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_digest(self, digest: str) -> int:
        """Drop every entry derived from content with ``digest``."""
        with self._lock:
            stale = [key for key, entry in self._entries.items() if entry.digest == digest]
            for key in stale:
                self._entries.pop(key, None)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def stats(self) -> Dict[str, object]:
        with self._lock:
            return {
                "size": len(self._entries),
                "keys": sorted(self._entries),
                "hits": self.hits,
                "misses": self.misses,
            }


def hash_bytes(raw: bytes) -> str:
    return hashlib.sha256(raw).hexdigest()


class CachedReader:
    """Read-only repository access shared by the detector and every check.

    Passing ``cache=None`` disables memoization entirely. Read failures are
    reported as ``None`` rather than raised.
    """

    def __init__(self, cache: FileCache | None = None) -> None:
        self.cache = cache

    # ------------------------------------------------------------------
    # File contents

    def read_text(self, path: str | os.PathLike[str]) -> Optional[str]:
        return self._load("text", Path(path), _decode)

    def read_json(self, path: str | os.PathLike[str]) -> Optional[Any]:
        return self._load("json", Path(path), _parse_json)

    # ------------------------------------------------------------------
    # Filesystem facts

    @staticmethod
    def exists(path: str | os.PathLike[str]) -> bool:
        return os.path.exists(path)

    @staticmethod
    def is_file(path: str | os.PathLike[str]) -> bool:
        return os.path.isfile(path)

    @staticmethod
    def is_dir(path: str | os.PathLike[str]) -> bool:
        return os.path.isdir(path)

    @staticmethod
    def size(path: str | os.PathLike[str]) -> Optional[int]:
        try:
            return os.stat(path).st_size
        except OSError:
            return None

    @staticmethod
    def list_dir(path: str | os.PathLike[str]) -> List[Tuple[str, bool]]:
        """Return ``(name, is_dir)`` pairs for direct children, empty on error."""
        try:
            with os.scandir(path) as entries:
                return sorted((entry.name, entry.is_dir()) for entry in entries)
        except OSError:
            return []

    def walk(
        self,
        root: str | os.PathLike[str],
        rules: Sequence[IgnoreRule] = (),
        ignore_extensions: Sequence[str] = (),
    ) -> List[str]:
        """Return sorted relative paths of every file below ``root``."""
        root_path = Path(root)
        try:
            root_mtime = os.stat(root_path).st_mtime_ns
        except OSError:
            return []

        key = "walk:{}:{}:{}".format(
            root_path,
            ",".join(rule.pattern for rule in rules),
            ",".join(ignore_extensions),
        )
        if self.cache is not None:
            entry = self.cache.get(key)
            if entry is not None and entry.mtime_ns == root_mtime:
                return list(entry.value)

        files = sorted(iter_files(root_path, rules, ignore_extensions))
        if self.cache is not None:
            self.cache.set(key, tuple(files), digest="", mtime_ns=root_mtime)
        return files

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, kind: str, path: Path, parse: Callable[[bytes], Any]) -> Any:
        try:
            stat_result = path.stat()
        except OSError:
            return None
        if not path.is_file():
            return None

        key = f"{kind}:{path}"
        entry = self.cache.get(key) if self.cache is not None else None

        try:
            raw = path.read_bytes()
        except OSError:
            return None
        digest = hash_bytes(raw)

        if entry is not None and entry.digest == digest:
            value = entry.value
        else:
            value = parse(raw)

        if self.cache is not None:
            self.cache.set(
                key,
                value,
                digest=digest,
                size=stat_result.st_size,
                mtime_ns=stat_result.st_mtime_ns,
            )
        return value


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _parse_json(raw: bytes) -> Optional[Any]:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None


__all__ = ["CacheEntry", "CachedReader", "FileCache", "DEFAULT_TTL", "hash_bytes"]

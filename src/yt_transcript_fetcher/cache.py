"""
cache.py — Pluggable key/value caches for fetched transcripts.

Fetching one transcript costs three round-trips to YouTube, so callers can
pass any object with `get()` / `set()` in TranscriptConfig.cache and repeated
requests are served locally.  Two implementations ship with the package:

    InMemoryCache   Process-local dict; entries vanish with the process.
    FileCache       One JSON file per key under a directory.

Values are opaque strings (the pipeline stores JSON).  TTLs are in seconds.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
import time
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

# Entries live for an hour unless the caller says otherwise.
DEFAULT_CACHE_TTL = 3600.0

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_-]")


@runtime_checkable
class CacheStrategy(Protocol):
    """Anything with these two methods can be used as a transcript cache."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: float | None = None) -> None: ...


# ---------------------------------------------------------------------------
# In-memory cache
# ---------------------------------------------------------------------------

class InMemoryCache:
    """
    Dict-backed cache shared by every caller in the process.

    Expired entries are removed lazily, the moment a `get()` sees them.

    Example:
        cache = InMemoryCache(default_ttl=1800)
        get_transcript("dQw4w9WgXcQ", cache=cache)
    """

    def __init__(self, default_ttl: float = DEFAULT_CACHE_TTL) -> None:
        self.default_ttl = default_ttl
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires = entry
            if expires > time.time():
                return value
            del self._entries[key]
            return None

    def set(self, key: str, value: str, ttl: float | None = None) -> None:
        expires = time.time() + (self.default_ttl if ttl is None else ttl)
        with self._lock:
            self._entries[key] = (value, expires)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ---------------------------------------------------------------------------
# File cache
# ---------------------------------------------------------------------------

def _sanitize_key(key: str) -> str:
    """Map a cache key onto a safe file name ("yt:x:y" -> "yt_x_y")."""
    return _UNSAFE_KEY_CHARS.sub("_", key)


class FileCache:
    """
    Cache that keeps one JSON file per key on disk.

    Each file holds `{"value": ..., "expires": <epoch seconds>}`.  The
    directory is created on first use.  There is no cross-process locking:
    two processes writing the same key race and the last write wins.

    Args:
        cache_dir:   Directory for cache files.
        default_ttl: Lifetime in seconds for entries stored without a ttl.
    """

    def __init__(self, cache_dir: str = "./cache", default_ttl: float = DEFAULT_CACHE_TTL) -> None:
        self.cache_dir = cache_dir
        self.default_ttl = default_ttl

    def _path(self, key: str) -> str:
        return os.path.join(self.cache_dir, _sanitize_key(key))

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                payload = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable cache file %s: %s", path, exc)
            self._remove(path)
            return None

        if not isinstance(payload, dict) or payload.get("expires", 0) <= time.time():
            self._remove(path)
            return None
        return payload.get("value")

    def set(self, key: str, value: str, ttl: float | None = None) -> None:
        os.makedirs(self.cache_dir, exist_ok=True)
        expires = time.time() + (self.default_ttl if ttl is None else ttl)
        with open(self._path(key), "w", encoding="utf-8") as fh:
            json.dump({"value": value, "expires": expires}, fh)

    @staticmethod
    def _remove(path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass

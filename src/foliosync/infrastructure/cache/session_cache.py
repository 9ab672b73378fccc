"""
Session cache for store snapshots and selections.

Entries are JSON envelopes ``{"timestamp": <epoch seconds>, "data": value}``
kept in a bounded LRU map and, when a directory is configured, mirrored to
one file per key. Every operation is best-effort: failures are logged and
reported as a miss, never raised.
"""

import json
import time
from pathlib import Path
from threading import RLock
from typing import Any

from cachetools import LRUCache
from loguru import logger

from foliosync.core.constants import CACHE_MAX_ENTRIES
from foliosync.core.exceptions.portfolio import CacheError, ConfigurationError
from foliosync.core.interfaces import ILocalCache


class SessionCache(ILocalCache):
    """Best-effort key/value cache with optional file mirroring."""

    def __init__(self, directory: str | Path | None = None, max_entries: int = CACHE_MAX_ENTRIES):
        """Initialize the session cache.

        Args:
            directory: Where to mirror entries as ``<key>.json``; memory only when None
            max_entries: Entries kept in memory before least recently used are evicted

        Raises:
            ConfigurationError: If max_entries is not positive
        """
        if max_entries <= 0:
            raise ConfigurationError(f"Cache size must be positive, got {max_entries}")

        self.directory = Path(directory) if directory is not None else None
        self._entries: LRUCache[str, str] = LRUCache(maxsize=max_entries)
        self._lock = RLock()

    def _path(self, key: str) -> Path:
        if self.directory is None:
            raise CacheError("No cache directory configured")
        return self.directory / f"{key}.json"

    def _read_envelope(self, key: str) -> dict[str, Any] | None:
        """Return the raw envelope for a key, falling back to disk on a memory miss."""
        with self._lock:
            raw = self._entries.get(key)

        if raw is None and self.directory is not None:
            path = self._path(key)
            if not path.exists():
                return None
            raw = path.read_text(encoding="utf-8")
            with self._lock:
                self._entries[key] = raw

        if raw is None:
            return None

        envelope = json.loads(raw)
        if not isinstance(envelope, dict) or "timestamp" not in envelope:
            raise CacheError(f"Malformed cache entry: {key}")
        return envelope

    def save(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value under key."""
        try:
            raw = json.dumps({"timestamp": time.time(), "data": value})
            with self._lock:
                self._entries[key] = raw
            if self.directory is not None:
                self.directory.mkdir(parents=True, exist_ok=True)
                self._path(key).write_text(raw, encoding="utf-8")
            logger.debug(f"Cached entry: {key}")
        except (TypeError, ValueError, OSError) as e:
            logger.warning(f"Failed to save cache entry '{key}': {e}")

    def load(self, key: str) -> Any | None:
        """Return the stored value, or None when missing or unreadable."""
        try:
            envelope = self._read_envelope(key)
        except (ValueError, OSError, CacheError) as e:
            logger.warning(f"Failed to load cache entry '{key}': {e}")
            return None

        if envelope is None:
            logger.debug(f"Cache miss: {key}")
            return None
        return envelope.get("data")

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        if self.directory is not None:
            try:
                self._path(key).unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Failed to remove cache entry '{key}': {e}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        if self.directory is not None and self.directory.exists():
            for path in self.directory.glob("*.json"):
                try:
                    path.unlink()
                except OSError as e:
                    logger.warning(f"Failed to remove cache file '{path.name}': {e}")
        logger.debug("Session cache cleared")

    def is_expired(self, key: str, max_age: float) -> bool:
        """Check if an entry is missing, unreadable or older than max_age seconds."""
        try:
            envelope = self._read_envelope(key)
            if envelope is None:
                return True
            return time.time() - float(envelope["timestamp"]) > max_age
        except (TypeError, ValueError, OSError, CacheError):
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

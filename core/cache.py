# core/cache.py

"""
In-memory store for open permission editors.

One editor per role, kept between requests until saved, discarded,
or expired. Single-process only; a second worker would not see the
same editors.
"""

from typing import Optional, Any
from datetime import datetime, timedelta
from threading import Lock
from core.config import settings
from core.logging_config import logger


class CacheEntry:
    """Represents a cached value with expiration time."""

    def __init__(self, value: Any, ttl_seconds: int):
        self.value = value
        self.expires_at = datetime.now() + timedelta(seconds=ttl_seconds)

    def is_expired(self) -> bool:
        """Check if the cache entry has expired."""
        return datetime.now() >= self.expires_at


class SimpleCache:
    """
    Simple in-memory cache with TTL support.

    Thread-safe for concurrent access.
    """

    def __init__(self):
        self._cache: dict[str, CacheEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a value from the cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if not found or expired
        """
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired():
                del self._cache[key]
                return None

            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: int = 300):
        with self._lock:
            self._cache[key] = CacheEntry(value, ttl_seconds)

    def delete(self, key: str):
        with self._lock:
            self._cache.pop(key, None)

    def clear(self):
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def cleanup_expired(self) -> int:
        """Remove all expired entries; returns how many were dropped."""
        with self._lock:
            expired_keys = [
                key for key, entry in self._cache.items()
                if entry.is_expired()
            ]
            for key in expired_keys:
                del self._cache[key]
            return len(expired_keys)

    def size(self) -> int:
        """Get the number of entries in the cache."""
        with self._lock:
            return len(self._cache)


# Global editor store
_editors = SimpleCache()


def _editor_key(role_id: str) -> str:
    return f"editor:{role_id}"


def get_editor(role_id: str):
    """Open editor for a role, or None. Reading refreshes nothing."""
    return _editors.get(_editor_key(role_id))


def put_editor(role_id: str, editor, ttl_seconds: Optional[int] = None):
    """Store (or replace) the editor for a role."""
    dropped = _editors.cleanup_expired()
    if dropped:
        logger.debug(f"Dropped {dropped} expired editor session(s)")
    _editors.set(_editor_key(role_id), editor, ttl_seconds or settings.EDITOR_SESSION_TTL_SECONDS)


def drop_editor(role_id: str):
    _editors.delete(_editor_key(role_id))


def editor_count() -> int:
    return _editors.size()


def cache_clear():
    """Clear all open editors."""
    _editors.clear()

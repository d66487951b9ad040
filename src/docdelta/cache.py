"""
Parse cache for docdelta.

Uses diskcache for SQLite-based persistent caching of parsed documents and
source files. Entries are keyed by content, so an edited file simply misses.
"""

import hashlib
from typing import Any, Callable, Optional, TypeVar

from diskcache import Cache

from .logging_config import get_logger

logger = get_logger(__name__)

# Bump when parser output changes shape so stale entries are never reused.
PARSER_VERSION = "1"

T = TypeVar("T")


def parse_key(path: str, content_hash: str, kind: str = "") -> str:
    """Cache key for one parsed file."""
    key_data = f"{path}:{content_hash}:{PARSER_VERSION}"
    if kind:
        key_data = f"{kind}:{key_data}"
    return hashlib.sha256(key_data.encode()).hexdigest()


class ParseCache:
    """
    diskcache-backed store for parsed content.

    Every failure is logged and treated as a miss, so a broken cache can
    slow a run down but never change its output.
    """

    def __init__(
        self,
        cache_dir: str = ".docdelta-cache",
        ttl_hours: int = 24,
        enabled: bool = True,
    ):
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600
        self.cache: Optional[Cache] = None

        if self.enabled:
            try:
                self.cache = Cache(cache_dir)
                logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_hours}h")
            except Exception as e:
                logger.warning(f"Cache unavailable at {cache_dir}: {e}")
                self.enabled = False
        else:
            logger.debug("Cache disabled")

    def get(self, key: str) -> Optional[Any]:
        if not self.enabled or self.cache is None:
            return None

        try:
            value = self.cache.get(key)
            if value is not None:
                logger.debug(f"Cache hit: {key[:16]}...")
            return value
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.set(key, value, expire=self.ttl_seconds or None)
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def get_or_parse(
        self, kind: str, path: str, content_hash: str, parse: Callable[[], T]
    ) -> T:
        """Return the cached parse of ``path`` or run ``parse`` and store it."""
        key = parse_key(path, content_hash, kind)
        cached = self.get(key)
        if cached is not None:
            return cached
        value = parse()
        self.set(key, value)
        return value

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        if self.cache is not None:
            self.cache.close()
            self.cache = None

    def __enter__(self) -> "ParseCache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

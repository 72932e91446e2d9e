# -*- coding: utf-8 -*-
"""
SQLite-backed response cache with per-entry TTL.

Stores JSON-serialized API responses (never the intermediate example
objects). Reads on an uninitialized or disabled cache are misses and
writes are ignored, so callers never need to check its state.
"""
import json
import logging
import time
from typing import Any

import aiosqlite

from .config import settings
from .validators import normalize_package_name

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS response_cache (
    key TEXT PRIMARY KEY,
    payload TEXT NOT NULL,
    created_at REAL NOT NULL,
    expires_at REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_cache_expires ON response_cache(expires_at);
CREATE INDEX IF NOT EXISTS idx_cache_created ON response_cache(created_at);
"""


def package_readme_key(package_name: str, version: str) -> str:
    return f"pkg_readme:{normalize_package_name(package_name)}:{version}"


def package_info_key(package_name: str) -> str:
    return f"pkg_info:{normalize_package_name(package_name)}:latest"


def search_key(
        query: str, limit: int, quality: float | None, popularity: float | None
) -> str:
    return f"search:{query.lower()}:{limit}:{quality}:{popularity}"


class ResponseCache:
    """Async SQLite response cache."""

    def __init__(self):
        self._db: aiosqlite.Connection | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        """Check if the cache database is open."""
        return self._initialized

    async def initialize(self) -> None:
        """Open the connection and create the schema if needed."""
        if self._initialized or not settings.CACHE_ENABLED:
            return

        settings.CACHE_PATH.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Connecting to cache database: {settings.CACHE_PATH}")
        self._db = await aiosqlite.connect(settings.CACHE_PATH)
        await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.executescript(SCHEMA)
        await self._db.commit()

        self._initialized = True
        logger.info("Cache initialized")

    async def close(self) -> None:
        """Close the database connection."""
        if self._db:
            await self._db.close()
            self._db = None
            self._initialized = False
            logger.info("Cache connection closed")

    async def get(self, key: str) -> dict[str, Any] | None:
        """
        Return a cached value, or None on miss.

        Expired entries are deleted on read.
        """
        if not self._db:
            return None

        async with self._db.execute(
            "SELECT payload, expires_at FROM response_cache WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            logger.debug(f"Cache miss: {key}")
            return None

        payload, expires_at = row
        if expires_at <= time.time():
            logger.debug(f"Cache expired: {key}")
            await self.delete(key)
            return None

        logger.debug(f"Cache hit: {key}")
        return json.loads(payload)

    async def set(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        """
        Store a JSON-serializable value.

        Args:
            key: Cache key
            value: JSON-serializable dict
            ttl: Time to live in seconds. Defaults to settings.CACHE_TTL_SECONDS.
        """
        if not self._db:
            return

        now = time.time()
        ttl = ttl if ttl is not None else settings.CACHE_TTL_SECONDS
        await self._db.execute(
            """
            INSERT OR REPLACE INTO response_cache (key, payload, created_at, expires_at)
            VALUES (?, ?, ?, ?)
            """,
            (key, json.dumps(value), now, now + ttl),
        )
        await self._db.commit()
        logger.debug(f"Cache set: {key} (TTL: {ttl}s)")

        await self._enforce_max_entries()

    async def delete(self, key: str) -> bool:
        """Delete an entry. Returns True if it existed."""
        if not self._db:
            return False

        cursor = await self._db.execute("DELETE FROM response_cache WHERE key = ?", (key,))
        await self._db.commit()
        return cursor.rowcount > 0

    async def clear(self) -> int:
        """Delete every entry. Returns the number removed."""
        if not self._db:
            return 0

        cursor = await self._db.execute("DELETE FROM response_cache")
        await self._db.commit()
        logger.info(f"Cache cleared: {cursor.rowcount} entries removed")
        return cursor.rowcount

    async def cleanup_expired(self) -> int:
        """Delete expired entries. Returns the number removed."""
        if not self._db:
            return 0

        cursor = await self._db.execute(
            "DELETE FROM response_cache WHERE expires_at <= ?", (time.time(),)
        )
        await self._db.commit()
        if cursor.rowcount > 0:
            logger.info(f"Cache cleanup: {cursor.rowcount} expired entries removed")
        return cursor.rowcount

    async def _enforce_max_entries(self) -> None:
        async with self._db.execute("SELECT COUNT(*) FROM response_cache") as cursor:
            (count,) = await cursor.fetchone()

        overflow = count - settings.CACHE_MAX_ENTRIES
        if overflow > 0:
            await self._db.execute(
                """
                DELETE FROM response_cache WHERE key IN (
                    SELECT key FROM response_cache ORDER BY created_at ASC LIMIT ?
                )
                """,
                (overflow,),
            )
            await self._db.commit()
            logger.debug(f"Cache over capacity: {overflow} oldest entries dropped")

    async def get_stats(self) -> dict[str, Any]:
        """Entry counts and configuration."""
        stats = {
            "entries": 0,
            "expired": 0,
            "max_entries": settings.CACHE_MAX_ENTRIES,
            "default_ttl": settings.CACHE_TTL_SECONDS,
        }
        if not self._db:
            return stats

        async with self._db.execute(
            "SELECT COUNT(*), SUM(CASE WHEN expires_at <= ? THEN 1 ELSE 0 END) "
            "FROM response_cache",
            (time.time(),),
        ) as cursor:
            total, expired = await cursor.fetchone()

        stats["entries"] = total or 0
        stats["expired"] = expired or 0
        return stats


# Global cache instance
cache = ResponseCache()

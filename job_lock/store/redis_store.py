"""
Redis implementation of the lock store.
"""

import logging

import redis.asyncio as redis

from job_lock.config import Settings, get_settings
from job_lock.store.base import LockStore

logger = logging.getLogger(__name__)


def _to_int(value: str | bytes | None) -> int | None:
    if value is None:
        return None
    return int(value)


class RedisLockStore:
    """
    Lock store backed by a single Redis instance.

    Uses SETNX, GET, GETSET and DEL, each of which is atomic per key.
    Connection and command errors are raised as ``redis.exceptions.RedisError``
    and are never suppressed here.
    """

    def __init__(self, client: redis.Redis):
        """
        Initialize the store.

        Args:
            client: An asyncio Redis client.
        """
        self.client = client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float | None = None) -> "RedisLockStore":
        """Create a store with its own client for the given Redis URL."""
        client = redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "RedisLockStore":
        """Create a store from application settings."""
        settings = settings or get_settings()
        return cls.from_url(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout_seconds,
        )

    async def set_if_absent(self, key: str, value: int) -> bool:
        return bool(await self.client.setnx(key, value))

    async def get(self, key: str) -> int | None:
        return _to_int(await self.client.get(key))

    async def get_and_set(self, key: str, value: int) -> int | None:
        return _to_int(await self.client.getset(key, value))

    async def delete(self, key: str) -> None:
        await self.client.delete(key)

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self.client.aclose()


# Process-wide default store
_store: LockStore | None = None


def get_lock_store() -> LockStore:
    """Get or create the default lock store."""
    global _store
    if _store is None:
        _store = RedisLockStore.from_settings()
        logger.info("Created Redis lock store")
    return _store


def set_lock_store(store: LockStore | None) -> None:
    """
    Replace the default lock store.

    Args:
        store: The store to use, or None to fall back to settings on next use.
    """
    global _store
    _store = store


async def close_lock_store() -> None:
    """Close the default store if it owns a Redis connection."""
    global _store
    if isinstance(_store, RedisLockStore):
        await _store.close()
    _store = None

"""
Lock store module.
Contains the store protocol and the Redis-backed implementation.
"""

from job_lock.store.base import LockStore
from job_lock.store.redis_store import (
    RedisLockStore,
    close_lock_store,
    get_lock_store,
    set_lock_store,
)

__all__ = [
    "LockStore",
    "RedisLockStore",
    "get_lock_store",
    "set_lock_store",
    "close_lock_store",
]

"""
Store protocol consumed by the lock.

Every method must be atomic for a single key. Values are integer expiry
timestamps in epoch seconds; absent keys read as None.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class LockStore(Protocol):
    """Key-value operations the acquisition and release paths rely on."""

    async def set_if_absent(self, key: str, value: int) -> bool:
        """Store value only if key does not exist. Returns True if stored."""
        ...

    async def get(self, key: str) -> int | None:
        """Return the stored value, or None if key does not exist."""
        ...

    async def get_and_set(self, key: str, value: int) -> int | None:
        """Atomically store value and return the previous one (None if absent)."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        ...

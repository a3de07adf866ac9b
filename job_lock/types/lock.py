"""
Lock-related type definitions.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from job_lock.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from job_lock.exceptions import LockConfigurationError
from job_lock.lock.keys import resolve_lock_key

# Computes a lock identifier from the job's arguments
KeyFunction = Callable[..., str]


@dataclass(frozen=True)
class LockPolicy:
    """
    Locking configuration for one job type.

    ``lock_timeout`` is how long a claim stays valid, in seconds. It must be
    longer than the job's worst-case run time plus scheduling delay, or a
    still-running job's lock can be reclaimed by a competitor.

    ``key_function`` replaces the default identifier scheme. It receives the
    job's arguments and its result is used verbatim, without the namespace
    prefix.
    """

    job_type: str
    lock_timeout: int = DEFAULT_LOCK_TIMEOUT_SECONDS
    key_function: KeyFunction | None = None
    key_prefix: str | None = None

    def __post_init__(self) -> None:
        if not self.job_type:
            raise LockConfigurationError("job_type must be a non-empty string")
        if isinstance(self.lock_timeout, bool) or not isinstance(self.lock_timeout, int):
            raise LockConfigurationError(
                f"lock_timeout must be an integer number of seconds, got {self.lock_timeout!r}"
            )
        if self.lock_timeout <= 0:
            raise LockConfigurationError(
                f"lock_timeout must be positive, got {self.lock_timeout}"
            )

    def resolve(self, *args: Any, **kwargs: Any) -> str:
        """Compute the lock identifier for one invocation of the job."""
        if self.key_function is not None:
            return self.key_function(*args, **kwargs)
        if self.key_prefix is None:
            return resolve_lock_key(self.job_type, args, kwargs)
        return resolve_lock_key(self.job_type, args, kwargs, prefix=self.key_prefix)

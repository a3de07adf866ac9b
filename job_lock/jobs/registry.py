"""
Locked job registry.

Registering a job attaches a LockPolicy to it and exposes the two hooks a
job-dispatch system calls:

- ``before_enqueue``: gate admission; False means a copy of this job with the
  same arguments is already queued or running, so skip it.
- ``around_perform``: wrap execution; the lock is released when the job exits.

Example:
    @register_locked_job("update_network_graph")
    async def update_network_graph(repo_id: int) -> None:
        ...

    # One run at a time regardless of repo_id
    @register_locked_job("rebuild_index", lock_key=lambda *args: "rebuild-index")
    async def rebuild_index(shard: int) -> None:
        ...

    if await update_network_graph.before_enqueue(42):
        queue.push("update_network_graph", 42)

    # in the worker
    await update_network_graph.perform(42)
"""

import asyncio
import inspect
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

from job_lock.config import get_settings
from job_lock.constants import SPAN_PERFORM_JOB
from job_lock.exceptions import UnknownJobTypeError
from job_lock.lock.acquire import Clock, try_acquire
from job_lock.lock.guard import guarded
from job_lock.observability.logging import lock_log_context
from job_lock.observability.tracing import get_tracer
from job_lock.store.base import LockStore
from job_lock.store.redis_store import get_lock_store
from job_lock.types.lock import KeyFunction, LockPolicy

logger = logging.getLogger(__name__)


class LockedJob:
    """A job callable bound to its lock policy."""

    def __init__(
        self,
        func: Callable[..., Any],
        policy: LockPolicy,
        store: LockStore | None = None,
        clock: Clock = time.time,
    ):
        """
        Initialize the locked job.

        Args:
            func: The job body. May be sync or async.
            policy: Lock policy for this job type.
            store: Store to lock in. Defaults to the process-wide store.
            clock: Source of the current epoch time.
        """
        self.func = func
        self.policy = policy
        self.clock = clock
        self._store = store
        self.__name__ = getattr(func, "__name__", policy.job_type)
        self.__doc__ = func.__doc__

    @property
    def job_type(self) -> str:
        return self.policy.job_type

    @property
    def lock_timeout(self) -> int:
        return self.policy.lock_timeout

    @property
    def store(self) -> LockStore:
        return self._store if self._store is not None else get_lock_store()

    def lock_key(self, *args: Any, **kwargs: Any) -> str:
        """Lock identifier for a call with these arguments."""
        return self.policy.resolve(*args, **kwargs)

    async def before_enqueue(self, *args: Any, **kwargs: Any) -> bool:
        """
        Pre-admission hook.

        Returns:
            True if the lock was taken and the job may be enqueued.
        """
        key = self.lock_key(*args, **kwargs)
        acquired = await try_acquire(
            self.store,
            key,
            self.lock_timeout,
            clock=self.clock,
        )
        if not acquired:
            logger.info(
                "Job already locked, not enqueueing",
                extra={"job_type": self.job_type, "lock_key": key},
            )
        return acquired

    @asynccontextmanager
    async def around_perform(self, *args: Any, **kwargs: Any) -> AsyncIterator[str]:
        """
        Execution-guard hook. Yields the lock key and releases it on exit.

        Log records emitted inside the block carry ``job_type`` and ``lock_key``.
        """
        key = self.lock_key(*args, **kwargs)
        with lock_log_context(self.job_type, key):
            async with guarded(self.store, key):
                yield key

    async def perform(self, *args: Any, **kwargs: Any) -> Any:
        """
        Run the job body inside ``around_perform``.

        Coroutine functions are awaited on the event loop. Plain functions run
        in a worker thread via ``asyncio.to_thread`` so a blocking body does not
        stall the loop; the log context is copied into that thread.
        """
        with get_tracer().start_as_current_span(SPAN_PERFORM_JOB) as span:
            span.set_attribute("job_type", self.job_type)
            async with self.around_perform(*args, **kwargs):
                if inspect.iscoroutinefunction(self.func):
                    result = await self.func(*args, **kwargs)
                else:
                    result = await asyncio.to_thread(self.func, *args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
                return result

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def __repr__(self) -> str:
        return f"LockedJob(job_type={self.job_type!r}, lock_timeout={self.lock_timeout})"


# Job registry
_jobs: dict[str, LockedJob] = {}


def register_locked_job(
    job_type: str,
    *,
    lock_timeout: int | None = None,
    lock_key: KeyFunction | None = None,
    store: LockStore | None = None,
    clock: Clock = time.time,
) -> Callable[[Callable[..., Any]], LockedJob]:
    """
    Decorator to register a job with a lock policy.

    Args:
        job_type: Name identifying the job type.
        lock_timeout: Seconds a claim stays valid. Defaults to
            ``lock_default_timeout_seconds`` from settings.
        lock_key: Custom identifier function receiving the job's arguments.
        store: Store to lock in. Defaults to the process-wide store.
        clock: Source of the current epoch time.

    Returns:
        Decorator producing a LockedJob.

    Raises:
        LockConfigurationError: If the timeout is not a positive integer.
    """
    settings = get_settings()
    policy = LockPolicy(
        job_type=job_type,
        lock_timeout=lock_timeout if lock_timeout is not None else settings.lock_default_timeout_seconds,
        key_function=lock_key,
        key_prefix=settings.lock_key_prefix,
    )

    def decorator(func: Callable[..., Any]) -> LockedJob:
        job = LockedJob(func, policy, store=store, clock=clock)
        if job_type in _jobs:
            logger.warning(f"Replacing locked job registration: {job_type}")
        _jobs[job_type] = job
        logger.info(
            f"Registered locked job: {job_type}",
            extra={"lock_timeout": policy.lock_timeout},
        )
        return job
    return decorator


def get_locked_job(job_type: str) -> LockedJob | None:
    """
    Get the locked job for a job type.

    Args:
        job_type: The job type.

    Returns:
        The LockedJob or None if not registered.
    """
    return _jobs.get(job_type)


def list_locked_jobs() -> list[str]:
    """List all registered job types."""
    return list(_jobs.keys())


def unregister_locked_job(job_type: str) -> None:
    """Remove a job type from the registry, if present."""
    _jobs.pop(job_type, None)


def _require(job_type: str) -> LockedJob:
    job = _jobs.get(job_type)
    if job is None:
        raise UnknownJobTypeError(job_type)
    return job


async def before_enqueue(job_type: str, *args: Any, **kwargs: Any) -> bool:
    """Pre-admission hook for a registered job type."""
    return await _require(job_type).before_enqueue(*args, **kwargs)


def around_perform(job_type: str, *args: Any, **kwargs: Any):
    """Execution-guard hook for a registered job type; use with ``async with``."""
    return _require(job_type).around_perform(*args, **kwargs)

"""
Guarded execution: release a lock on every exit path of the work it protects.
"""

import inspect
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from job_lock.constants import SPAN_RELEASE_LOCK, GuardStatus
from job_lock.observability.metrics import MetricsCollector, get_metrics
from job_lock.observability.tracing import get_tracer
from job_lock.store.base import LockStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def release(
    store: LockStore,
    key: str,
    metrics: MetricsCollector | None = None,
) -> None:
    """Delete the lock record at ``key``."""
    with get_tracer().start_as_current_span(SPAN_RELEASE_LOCK) as span:
        span.set_attribute("lock.key", key)
        await store.delete(key)

    (metrics or get_metrics()).record_release()
    logger.debug("Released lock", extra={"lock_key": key})


@asynccontextmanager
async def guarded(
    store: LockStore,
    key: str,
    *,
    metrics: MetricsCollector | None = None,
) -> AsyncIterator[None]:
    """
    Delete ``key`` when the block exits, however it exits.

    Does not acquire anything: entry is expected to have been gated by
    ``try_acquire``. Exceptions from the block are re-raised unchanged once
    the record is deleted. If the delete itself fails, the store error
    propagates and the record is left to expire.

    Example:
        async with guarded(store, key):
            await rebuild_graph(repo_id)
    """
    metrics = metrics or get_metrics()
    started = time.monotonic()
    status = GuardStatus.FAILED
    try:
        yield
        status = GuardStatus.SUCCEEDED
    finally:
        metrics.record_guarded_work(status, time.monotonic() - started)
        await release(store, key, metrics=metrics)


async def run_guarded(
    store: LockStore,
    key: str,
    work: Callable[[], T | Awaitable[T]],
    *,
    metrics: MetricsCollector | None = None,
) -> T:
    """
    Run ``work`` exactly once and delete ``key`` afterwards.

    Args:
        store: Store holding the lock records.
        key: Lock identifier to release.
        work: Zero-argument callable; may be a plain function or return an awaitable.
            Plain functions run inline on the event loop.
        metrics: Collector to record on. Defaults to the global one.

    Returns:
        Whatever ``work`` returns.
    """
    async with guarded(store, key, metrics=metrics):
        result: Any = work()
        if inspect.isawaitable(result):
            result = await result
        return result

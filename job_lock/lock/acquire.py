"""
Lock acquisition.

A claim is an expiry timestamp stored at the lock key. Competitors never
wait: an attempt either wins or reports that the caller must not proceed.
A holder that crashes leaves its record behind, and the record becomes
reclaimable once its expiry passes.
"""

import logging
import time
from collections.abc import Callable

from job_lock.constants import EXPIRY_MARGIN_SECONDS, SPAN_ACQUIRE_LOCK, AcquireOutcome
from job_lock.observability.metrics import MetricsCollector, get_metrics
from job_lock.observability.tracing import get_tracer
from job_lock.store.base import LockStore

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


async def attempt_acquire(
    store: LockStore,
    key: str,
    timeout_seconds: int,
    *,
    clock: Clock = time.time,
    metrics: MetricsCollector | None = None,
) -> AcquireOutcome:
    """
    Make one attempt to claim ``key``.

    Steps:
    1. SETNX the new expiry. Success means no record existed.
    2. Otherwise read the existing expiry. If it has not passed, the lock is
       held and the record is left untouched.
    3. Otherwise the record is stale. GETSET the new expiry and check the
       value it replaced: only a caller that swapped out a still-stale value
       wins. A caller whose swap returns a fresh expiry lost to a competitor
       that reclaimed first.

    Missing values read as expiry 0, i.e. stale. Store errors propagate.

    Args:
        store: Store holding the lock records.
        key: Lock identifier.
        timeout_seconds: How long the claim stays valid.
        clock: Source of the current epoch time.
        metrics: Collector to record the outcome on. Defaults to the global one.

    Returns:
        AcquireOutcome: what happened; ``outcome.acquired`` tells whether
        the caller now holds the lock.
    """
    now = int(clock())
    expiry = now + timeout_seconds + EXPIRY_MARGIN_SECONDS

    with get_tracer().start_as_current_span(SPAN_ACQUIRE_LOCK) as span:
        span.set_attribute("lock.key", key)
        span.set_attribute("lock.timeout_seconds", timeout_seconds)

        if await store.set_if_absent(key, expiry):
            outcome = AcquireOutcome.ACQUIRED
        else:
            current = await store.get(key) or 0
            if now <= current:
                outcome = AcquireOutcome.CONTENDED
            else:
                previous = await store.get_and_set(key, expiry) or 0
                if now > previous:
                    outcome = AcquireOutcome.RECLAIMED
                else:
                    outcome = AcquireOutcome.LOST_RACE

        span.set_attribute("lock.outcome", outcome.value)

    (metrics or get_metrics()).record_acquire(outcome)

    if outcome is AcquireOutcome.RECLAIMED:
        logger.warning(
            "Reclaimed stale lock",
            extra={"lock_key": key, "expires_at": expiry},
        )
    else:
        logger.debug(
            "Lock acquisition attempted",
            extra={"lock_key": key, "outcome": outcome.value},
        )

    return outcome


async def try_acquire(
    store: LockStore,
    key: str,
    timeout_seconds: int,
    *,
    clock: Clock = time.time,
    metrics: MetricsCollector | None = None,
) -> bool:
    """
    Try to claim ``key`` once.

    Returns:
        True if the caller holds the lock and may proceed, False otherwise.
    """
    outcome = await attempt_acquire(
        store,
        key,
        timeout_seconds,
        clock=clock,
        metrics=metrics,
    )
    return outcome.acquired

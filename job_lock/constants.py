"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class AcquireOutcome(StrEnum):
    """
    Result of a single lock acquisition attempt.

    - ACQUIRED: no record existed, the lock was created
    - CONTENDED: a valid record exists, caller must not proceed
    - RECLAIMED: a stale record was overwritten and this caller won
    - LOST_RACE: a stale record was overwritten, but a competitor got there first
    """

    ACQUIRED = "acquired"
    CONTENDED = "contended"
    RECLAIMED = "reclaimed"
    LOST_RACE = "lost_race"

    @property
    def acquired(self) -> bool:
        """Whether the caller now holds the lock."""
        return self in (AcquireOutcome.ACQUIRED, AcquireOutcome.RECLAIMED)


class GuardStatus(StrEnum):
    """How a guarded region exited."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


# Default values
DEFAULT_LOCK_TIMEOUT_SECONDS = 3600
LOCK_KEY_PREFIX = "lock:"

# Added to every expiry so a claim made late in a second is not seen as
# expired by a competitor reading in the same second
EXPIRY_MARGIN_SECONDS = 1

# Metrics names
METRIC_LOCK_ACQUIRE = "lock_acquire_total"
METRIC_LOCK_RELEASE = "lock_release_total"
METRIC_GUARDED_DURATION = "guarded_work_duration_seconds"

# Trace span names
SPAN_ACQUIRE_LOCK = "acquire_lock"
SPAN_RELEASE_LOCK = "release_lock"
SPAN_PERFORM_JOB = "perform_job"

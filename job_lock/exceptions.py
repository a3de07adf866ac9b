"""
Exceptions raised by the job lock.

Store failures are not wrapped: redis errors reach the caller unchanged.
Lock contention is never an exception, only a False result.
"""


class JobLockError(Exception):
    """Base class for job lock errors."""


class LockConfigurationError(JobLockError, ValueError):
    """Raised when a lock policy is registered with invalid settings."""


class UnknownJobTypeError(JobLockError, KeyError):
    """Raised when a hook is invoked for a job type that was never registered."""

    def __init__(self, job_type: str):
        super().__init__(job_type)
        self.job_type = job_type

    def __str__(self) -> str:
        return f"No locked job registered for job type: {self.job_type}"

"""
Locked job registry and host extension points.
"""

from job_lock.jobs.registry import (
    LockedJob,
    around_perform,
    before_enqueue,
    get_locked_job,
    list_locked_jobs,
    register_locked_job,
    unregister_locked_job,
)

__all__ = [
    "LockedJob",
    "register_locked_job",
    "get_locked_job",
    "list_locked_jobs",
    "unregister_locked_job",
    "before_enqueue",
    "around_perform",
]

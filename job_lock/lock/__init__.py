"""
Lock module.
Contains key derivation, acquisition, and guarded release.
"""

from job_lock.lock.acquire import attempt_acquire, try_acquire
from job_lock.lock.guard import guarded, run_guarded
from job_lock.lock.keys import normalize_arg, resolve_lock_key

__all__ = [
    "resolve_lock_key",
    "normalize_arg",
    "attempt_acquire",
    "try_acquire",
    "guarded",
    "run_guarded",
]

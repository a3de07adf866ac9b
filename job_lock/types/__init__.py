"""
Type definitions for the job lock.
"""

from job_lock.types.lock import KeyFunction, LockPolicy

__all__ = [
    "KeyFunction",
    "LockPolicy",
]

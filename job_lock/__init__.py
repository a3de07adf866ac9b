"""
Distributed Job Lock

Prevents duplicate copies of a job (same type, same arguments) from being
enqueued or executed concurrently across workers that share a Redis store.
"""

__version__ = "1.0.0"

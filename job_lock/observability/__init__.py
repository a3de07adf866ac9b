"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from job_lock.observability.logging import lock_log_context, setup_logging
from job_lock.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from job_lock.observability.tracing import get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "lock_log_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
]

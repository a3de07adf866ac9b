"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from job_lock.constants import (
    METRIC_GUARDED_DURATION,
    METRIC_LOCK_ACQUIRE,
    METRIC_LOCK_RELEASE,
    AcquireOutcome,
    GuardStatus,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for job locks.

    Collects metrics for:
    - Acquisition attempts, by outcome
    - Lock releases
    - Duration of guarded work
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.lock_acquire = Counter(
            METRIC_LOCK_ACQUIRE,
            "Total number of lock acquisition attempts",
            ["outcome"],
            registry=self._registry,
        )

        self.lock_release = Counter(
            METRIC_LOCK_RELEASE,
            "Total number of lock releases",
            registry=self._registry,
        )

        self.guarded_duration = Histogram(
            METRIC_GUARDED_DURATION,
            "Duration of work executed while holding a lock, in seconds",
            ["status"],
            buckets=(0.1, 0.5, 1.0, 5.0, 30.0, 60.0, 300.0, 900.0, 3600.0),
            registry=self._registry,
        )

    def record_acquire(self, outcome: AcquireOutcome) -> None:
        """Record a lock acquisition attempt."""
        self.lock_acquire.labels(outcome=outcome.value).inc()

    def record_release(self) -> None:
        """Record a lock release."""
        self.lock_release.inc()

    def record_guarded_work(self, status: GuardStatus, duration_seconds: float) -> None:
        """Record how long guarded work ran and how it exited."""
        self.guarded_duration.labels(status=status.value).observe(duration_seconds)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics

"""
Prometheus metrics collection.
"""

from prometheus_client import (
    Counter,
    Gauge,
    CollectorRegistry,
    generate_latest,
    CONTENT_TYPE_LATEST,
    REGISTRY,
)

from rsmq.constants import (
    METRIC_EMPTY_RECEIVES,
    METRIC_MESSAGES_DELETED,
    METRIC_MESSAGES_POPPED,
    METRIC_MESSAGES_RECEIVED,
    METRIC_MESSAGES_SENT,
    METRIC_QUEUE_DEPTH,
    METRIC_REALTIME_FAILURES,
    METRIC_VISIBILITY_CHANGES,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the queue engine.

    Collects metrics for:
    - Messages sent, received, popped and deleted
    - Visibility changes and empty receives
    - Realtime publish failures
    - Queue depth as last published
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.messages_sent = Counter(
            METRIC_MESSAGES_SENT,
            "Total number of messages sent",
            ["queue"],
            registry=self._registry,
        )

        self.messages_received = Counter(
            METRIC_MESSAGES_RECEIVED,
            "Total number of messages leased by receive",
            ["queue"],
            registry=self._registry,
        )

        self.messages_popped = Counter(
            METRIC_MESSAGES_POPPED,
            "Total number of messages popped",
            ["queue"],
            registry=self._registry,
        )

        self.messages_deleted = Counter(
            METRIC_MESSAGES_DELETED,
            "Total number of messages deleted",
            ["queue"],
            registry=self._registry,
        )

        self.visibility_changes = Counter(
            METRIC_VISIBILITY_CHANGES,
            "Total number of applied visibility changes",
            ["queue"],
            registry=self._registry,
        )

        self.empty_receives = Counter(
            METRIC_EMPTY_RECEIVES,
            "Total number of receive or pop calls that found no message",
            ["queue"],
            registry=self._registry,
        )

        self.realtime_failures = Counter(
            METRIC_REALTIME_FAILURES,
            "Total number of failed realtime publishes",
            ["queue"],
            registry=self._registry,
        )

        # Queue depth gauge (by queue)
        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of messages in the queue index",
            ["queue"],
            registry=self._registry,
        )

    def record_sent(self, queue: str) -> None:
        """Record a sent message."""
        self.messages_sent.labels(queue=queue).inc()

    def record_received(self, queue: str, found: bool) -> None:
        """Record a receive call."""
        if found:
            self.messages_received.labels(queue=queue).inc()
        else:
            self.empty_receives.labels(queue=queue).inc()

    def record_popped(self, queue: str, found: bool) -> None:
        """Record a pop call."""
        if found:
            self.messages_popped.labels(queue=queue).inc()
        else:
            self.empty_receives.labels(queue=queue).inc()

    def record_deleted(self, queue: str) -> None:
        """Record a deleted message."""
        self.messages_deleted.labels(queue=queue).inc()

    def record_visibility_change(self, queue: str) -> None:
        """Record an applied visibility change."""
        self.visibility_changes.labels(queue=queue).inc()

    def record_realtime_failure(self, queue: str) -> None:
        """Record a failed realtime publish."""
        self.realtime_failures.labels(queue=queue).inc()

    def update_queue_depth(self, queue: str, depth: int) -> None:
        """Update queue depth for a queue."""
        self.queue_depth.labels(queue=queue).set(depth)

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
    Get the metrics collector instance.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics

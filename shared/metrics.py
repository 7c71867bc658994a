"""
Prometheus metrics for the booking pipeline services.

Each PipelineMetrics owns its own CollectorRegistry, so components can be
handed a fresh instance (tests) or share the process-wide one returned by
default_metrics(). Services expose the registry at GET /metrics.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


class PipelineMetrics:
    """Counters and histograms shared by the booking, payment and delivery services."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.http_requests_total = Counter(
            "http_requests_total",
            "Total number of HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry,
        )
        self.http_request_duration_seconds = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry,
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        )
        self.bookings_created_total = Counter(
            "bookings_created_total",
            "Bookings persisted by the orchestrator",
            registry=self.registry,
        )
        self.events_produced_total = Counter(
            "events_produced_total",
            "Records appended to the event log",
            ["topic"],
            registry=self.registry,
        )
        self.events_consumed_total = Counter(
            "events_consumed_total",
            "Records handed to a consumer group handler",
            ["topic", "group"],
            registry=self.registry,
        )

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float) -> None:
        self.http_requests_total.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
        self.http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

    def record_booking_created(self) -> None:
        self.bookings_created_total.inc()

    def record_event_produced(self, topic: str) -> None:
        self.events_produced_total.labels(topic=topic).inc()

    def record_event_consumed(self, topic: str, group: str) -> None:
        self.events_consumed_total.labels(topic=topic, group=group).inc()

    def sample(self, name: str, labels: Optional[dict] = None) -> float:
        """Current value of a sample, 0.0 if it was never recorded (for tests)."""
        return self.registry.get_sample_value(name, labels or {}) or 0.0

    def render(self) -> bytes:
        """Exposition-format payload for GET /metrics."""
        return generate_latest(self.registry)

    @staticmethod
    def content_type() -> str:
        return CONTENT_TYPE_LATEST


_default: Optional[PipelineMetrics] = None


def default_metrics() -> PipelineMetrics:
    """Process-wide metrics instance."""
    global _default
    if _default is None:
        _default = PipelineMetrics()
    return _default

"""
Tests for the Prometheus metrics holder.
"""

from prometheus_client import CollectorRegistry

from shared.metrics import PipelineMetrics, default_metrics


class TestPipelineMetrics:
    """Each instance counts into its own registry."""

    def test_http_request_recorded(self):
        metrics = PipelineMetrics()

        metrics.record_http_request("GET", "/health", 200, 0.003)
        metrics.record_http_request("GET", "/health", 200, 0.2)

        labels = {"method": "GET", "endpoint": "/health"}
        assert metrics.sample("http_requests_total", {**labels, "status_code": "200"}) == 2
        assert metrics.sample("http_request_duration_seconds_count", labels) == 2
        assert metrics.sample("http_request_duration_seconds_bucket", {**labels, "le": "0.005"}) == 1

    def test_instances_do_not_share_counts(self):
        first = PipelineMetrics()
        second = PipelineMetrics()

        first.record_booking_created()

        assert first.sample("bookings_created_total") == 1
        assert second.sample("bookings_created_total") == 0

    def test_registry_can_be_supplied(self):
        registry = CollectorRegistry()
        metrics = PipelineMetrics(registry=registry)

        metrics.record_event_produced("booking-created")

        assert registry.get_sample_value("events_produced_total", {"topic": "booking-created"}) == 1

    def test_render(self):
        metrics = PipelineMetrics()
        metrics.record_event_consumed("booking-created", "notification-service")

        text = metrics.render().decode()

        assert 'events_consumed_total{topic="booking-created",group="notification-service"} 1.0' in text
        assert metrics.content_type().startswith("text/plain")

    def test_unrecorded_sample_is_zero(self):
        assert PipelineMetrics().sample("events_produced_total", {"topic": "nothing"}) == 0


def test_default_metrics_is_shared():
    assert default_metrics() is default_metrics()

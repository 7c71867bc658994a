"""
Tests for the payment service API.
"""

import pytest
from fastapi.testclient import TestClient

from api.payment_app import app, reset_api_state
from shared.metrics import PipelineMetrics


@pytest.fixture
def api_client(simulator):
    reset_api_state(simulator)
    yield TestClient(app)
    reset_api_state(None)


class TestCreatePayment:
    """POST /api/payments"""

    def test_accepted(self, api_client, simulator, webhook_sender):
        response = api_client.post("/api/payments", json={"booking_id": "b-1", "amount": 10000.0})

        assert response.status_code == 202
        data = response.json()
        assert data["status"] == "processing"
        assert data["message"] == "payment is being processed"

        assert simulator.registry.wait(timeout=5)
        assert webhook_sender.delivered[0].payment_id == data["payment_id"]
        assert webhook_sender.delivered[0].status == "paid"

    def test_empty_currency_defaults(self, api_client, simulator, webhook_sender):
        response = api_client.post("/api/payments", json={"booking_id": "b-1", "amount": 1.0, "currency": ""})

        assert response.status_code == 202

    def test_zero_amount_accepted_then_failed(self, api_client, simulator, webhook_sender):
        response = api_client.post("/api/payments", json={"booking_id": "b-1", "amount": 0})

        assert response.status_code == 202
        assert simulator.registry.wait(timeout=5)
        assert webhook_sender.delivered[0].status == "failed"

    def test_missing_booking_id(self, api_client):
        assert api_client.post("/api/payments", json={"amount": 1.0}).status_code == 422


def test_health(api_client):
    assert api_client.get("/health").json()["service"] == "payment-service"


def test_metrics_endpoint(simulator):
    metrics = PipelineMetrics()
    reset_api_state(simulator, metrics)
    client = TestClient(app)
    try:
        client.post("/api/payments", json={"booking_id": "b-1", "amount": 1.0})
        response = client.get("/metrics")
    finally:
        reset_api_state()

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    labels = {"method": "POST", "endpoint": "/api/payments", "status_code": "202"}
    assert metrics.sample("http_requests_total", labels) == 1
    assert metrics.sample(
        "http_request_duration_seconds_count", {"method": "POST", "endpoint": "/api/payments"}
    ) == 1

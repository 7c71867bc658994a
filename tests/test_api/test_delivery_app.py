"""
Tests for the delivery service API.
"""

import pytest
from fastapi.testclient import TestClient

from api.delivery_app import app, get_channels, reset_api_state
from shared.channels import NotificationChannels
from shared.config import get_settings
from shared.metrics import PipelineMetrics


@pytest.fixture
def api_client(channels: NotificationChannels):
    reset_api_state(channels)
    yield TestClient(app)
    reset_api_state(None)


class TestSendNotification:
    """POST /api/notifications/send"""

    def test_email(self, api_client, channels):
        response = api_client.post("/api/notifications/send", json={
            "channel": "email",
            "recipient": "user-1",
            "subject": "Booking confirmed",
            "message": "Your booking is confirmed!",
        })

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert channels.email.find_message_to("user-1").subject == "Booking confirmed"

    def test_channel_defaults_to_email(self, api_client, channels):
        response = api_client.post("/api/notifications/send", json={"recipient": "user-1", "message": "hi"})

        assert response.status_code == 200
        assert channels.email.get_sent_count() == 1

    def test_telegram_uses_configured_bot_token(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        get_settings.cache_clear()
        reset_api_state()
        try:
            response = TestClient(app).post("/api/notifications/send", json={
                "channel": "telegram",
                "recipient": "42",
                "subject": "Booking confirmed",
                "message": "hi",
            })

            assert response.status_code == 200
            assert get_channels().telegram.find_message_to("42").success
        finally:
            reset_api_state()
            get_settings.cache_clear()

    def test_telegram_without_token_is_502(self, api_client):
        response = api_client.post("/api/notifications/send", json={
            "channel": "telegram",
            "recipient": "12345",
            "message": "hi",
        })

        assert response.status_code == 502
        assert response.json()["detail"] == "telegram bot not configured"

    def test_channel_failure_is_502(self):
        reset_api_state(NotificationChannels(email_fail_rate=1.0))
        try:
            response = TestClient(app).post("/api/notifications/send", json={"recipient": "user-1", "message": "hi"})
        finally:
            reset_api_state()

        assert response.status_code == 502
        assert response.json()["detail"] == "Simulated email delivery failure"

    def test_unknown_channel_rejected(self, api_client, channels):
        response = api_client.post("/api/notifications/send", json={
            "channel": "pigeon",
            "recipient": "user-1",
            "message": "hi",
        })

        assert response.status_code == 422
        assert channels.get_total_sent_count() == 0

    def test_empty_recipient_rejected(self, api_client):
        response = api_client.post("/api/notifications/send", json={"recipient": "", "message": "hi"})

        assert response.status_code == 422


class TestMetrics:
    """GET /metrics"""

    def test_sends_are_counted(self, channels):
        metrics = PipelineMetrics()
        reset_api_state(channels, metrics)
        client = TestClient(app)
        try:
            client.post("/api/notifications/send", json={"recipient": "user-1", "message": "hi"})
            client.post("/api/notifications/send", json={"channel": "pigeon", "recipient": "user-1", "message": "hi"})
            response = client.get("/metrics")
        finally:
            reset_api_state()

        assert response.status_code == 200
        assert "http_requests_total" in response.text
        sent = {"method": "POST", "endpoint": "/api/notifications/send"}
        assert metrics.sample("http_requests_total", {**sent, "status_code": "200"}) == 1
        assert metrics.sample("http_requests_total", {**sent, "status_code": "422"}) == 1

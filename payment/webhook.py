"""
Delivery of settlement outcomes back to the booking service.

A webhook is sent exactly once. Senders raise WebhookDeliveryError when the
delivery did not go through; the payment simulator logs that and moves on.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import httpx

from shared.errors import BookingSystemError, WebhookDeliveryError
from shared.models import PaymentWebhook

if TYPE_CHECKING:
    from booking.orchestrator import BookingOrchestrator


class WebhookSender(ABC):
    """Delivers a PaymentWebhook somewhere."""

    @abstractmethod
    def deliver(self, webhook: PaymentWebhook) -> None:
        """
        Raises:
            WebhookDeliveryError: The webhook was not accepted
        """


class HttpWebhookSender(WebhookSender):
    """POSTs webhooks as JSON to the booking service callback URL."""

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.webhook_url = webhook_url
        self.http = http or httpx.Client(timeout=timeout)
        self.logger = logger or logging.getLogger("payment_webhook")

    def close(self) -> None:
        self.http.close()

    def deliver(self, webhook: PaymentWebhook) -> None:
        try:
            response = self.http.post(self.webhook_url, json=webhook.model_dump())
        except httpx.HTTPError as e:
            raise WebhookDeliveryError(f"failed to send webhook: {e}") from e

        if response.status_code != 200:
            raise WebhookDeliveryError(f"webhook returned status {response.status_code}")

        self.logger.info(
            f"Payment webhook sent: payment={webhook.payment_id} "
            f"booking={webhook.booking_id} status={webhook.status}"
        )


class LocalWebhookSender(WebhookSender):
    """Applies webhooks directly to an in-process booking orchestrator."""

    def __init__(self, orchestrator: "BookingOrchestrator"):
        self.orchestrator = orchestrator

    def deliver(self, webhook: PaymentWebhook) -> None:
        try:
            self.orchestrator.apply_payment_webhook(webhook)
        except BookingSystemError as e:
            raise WebhookDeliveryError(f"booking service rejected webhook: {e}") from e


class RecordingWebhookSender(WebhookSender):
    """Keeps delivered webhooks in memory (for tests and demos)."""

    def __init__(self):
        self.delivered: list[PaymentWebhook] = []

    def deliver(self, webhook: PaymentWebhook) -> None:
        self.delivered.append(webhook)

"""
Client for the delivery service.

Implements the same send(channel, recipient, subject, body) contract as the
in-process NotificationChannels facade, but hands the message to the
delivery service over HTTP.
"""

import logging
from typing import Optional

import httpx

from shared.channels import NotificationResult
from shared.errors import NotificationDeliveryError
from shared.models import NotificationChannelType, NotificationRequest


class DeliveryClient:
    """HTTP notification channel."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=timeout)
        self.logger = logger or logging.getLogger("delivery_client")

    def close(self) -> None:
        self.http.close()

    def send(
        self,
        channel: str,
        recipient: str,
        subject: Optional[str],
        body: str,
    ) -> NotificationResult:
        """
        Ask the delivery service to send a message.

        Raises:
            NotificationDeliveryError: The delivery service could not be
                reached or did not answer 200
        """
        request = NotificationRequest(
            channel=channel,
            recipient=recipient,
            subject=subject,
            message=body,
        )
        url = f"{self.base_url}/api/notifications/send"

        try:
            response = self.http.post(url, json=request.model_dump(exclude_none=True))
        except httpx.HTTPError as e:
            self.logger.error(f"Failed to send notification via delivery service: {e}")
            raise NotificationDeliveryError(f"delivery service unreachable: {e}") from e

        if response.status_code != 200:
            raise NotificationDeliveryError(f"delivery service returned status {response.status_code}")

        return NotificationResult(
            success=True,
            channel=NotificationChannelType(channel),
            recipient=recipient,
            subject=subject,
            body=body,
        )

"""
Payment initiation from the booking service.

The booking service only ever asks for a payment to be created and gets
back an acceptance (payment id + "processing"). Whether the payment went
through is learned later from the payment webhook.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

import httpx

from shared.errors import PaymentError
from shared.models import PaymentRequest, PaymentResponse

if TYPE_CHECKING:
    from payment.simulator import PaymentSimulator


class PaymentGateway(ABC):
    """Contract for creating payments."""

    @abstractmethod
    def create_payment(self, booking_id: str, amount: float) -> PaymentResponse:
        """
        Request a payment for a booking.

        Raises:
            PaymentError: The payment service did not accept the request
        """


class HttpPaymentGateway(PaymentGateway):
    """PaymentGateway that calls the payment service over HTTP."""

    def __init__(
        self,
        base_url: str,
        currency: str = "RUB",
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.currency = currency
        self.http = http or httpx.Client(timeout=timeout)
        self.logger = logger or logging.getLogger("payment_gateway")

    def close(self) -> None:
        self.http.close()

    def create_payment(self, booking_id: str, amount: float) -> PaymentResponse:
        request = PaymentRequest(booking_id=booking_id, amount=amount, currency=self.currency)
        url = f"{self.base_url}/api/payments"

        try:
            response = self.http.post(url, json=request.model_dump())
        except httpx.HTTPError as e:
            self.logger.error(f"Failed to create payment for booking {booking_id}: {e}")
            raise PaymentError(f"payment service unreachable: {e}") from e

        if response.status_code != 202:
            raise PaymentError(f"payment service returned status {response.status_code}")

        try:
            return PaymentResponse.model_validate(response.json())
        except ValueError as e:
            raise PaymentError(f"failed to decode payment response: {e}") from e


class LocalPaymentGateway(PaymentGateway):
    """PaymentGateway that hands requests to an in-process payment simulator."""

    def __init__(self, simulator: "PaymentSimulator", currency: str = "RUB"):
        self.simulator = simulator
        self.currency = currency

    def create_payment(self, booking_id: str, amount: float) -> PaymentResponse:
        return self.simulator.process_payment(
            PaymentRequest(booking_id=booking_id, amount=amount, currency=self.currency)
        )

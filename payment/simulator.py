"""
Payment service simulator.

A payment is accepted immediately and reported as "processing". Settlement
happens later, in the background:

    processing --(settlement_delay)--> paid | failed --> webhook

The outcome is a business rule, not chance: amounts <= 0 fail, everything
else is paid. The webhook is delivered once; a delivery failure is logged and
forgotten.

Background settlements are owned by a SettlementRegistry. The caller of
process_payment never waits for them, but the service can see how many are
in flight and drain them on shutdown. They are still not persisted: if the
process dies mid-settlement, that outcome and its webhook are lost.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import uuid4

from payment.webhook import WebhookSender
from shared.errors import AsyncDeliveryError
from shared.models import (
    PaymentRequest,
    PaymentResponse,
    PaymentWebhook,
    SettlementStatus,
)


def decide_outcome(amount: float) -> SettlementStatus:
    """Settlement rule: non-positive amounts fail, positive amounts are paid."""
    if amount <= 0:
        return SettlementStatus.FAILED
    return SettlementStatus.PAID


class SettlementRegistry:
    """
    Owns the background settlement threads.

    Threads are daemons so a stuck settlement never blocks interpreter exit.
    There is no limit on how many run at once.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._threads: dict[str, threading.Thread] = {}
        self._lock = threading.Lock()
        self.logger = logger or logging.getLogger("settlement_registry")

    def spawn(self, payment_id: str, target: Callable[[], None]) -> threading.Thread:
        """Start target on its own thread, tracked under payment_id."""

        def run():
            try:
                target()
            except Exception as e:
                self.logger.error(f"Settlement {payment_id} crashed: {e}")
            finally:
                with self._lock:
                    self._threads.pop(payment_id, None)

        thread = threading.Thread(target=run, name=f"settlement-{payment_id[:8]}", daemon=True)
        with self._lock:
            self._threads[payment_id] = thread
        thread.start()
        return thread

    def in_flight(self) -> int:
        """Number of settlements that have not finished yet."""
        with self._lock:
            return len(self._threads)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for all in-flight settlements.

        Returns:
            True if everything finished, False if the timeout ran out first
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._lock:
                threads = list(self._threads.values())
            if not threads:
                return True
            for thread in threads:
                remaining = None if deadline is None else max(deadline - time.monotonic(), 0)
                thread.join(remaining)
                if deadline is not None and time.monotonic() >= deadline:
                    return self.in_flight() == 0


class PaymentSimulator:
    """
    Accepts payments and settles them asynchronously.

    Example:
        simulator = PaymentSimulator(HttpWebhookSender(webhook_url))
        response = simulator.process_payment(PaymentRequest(booking_id="b-1", amount=5000))
        # response.status == "processing"; the webhook follows ~2s later
    """

    def __init__(
        self,
        webhook_sender: WebhookSender,
        settlement_delay: float = 2.0,
        registry: Optional[SettlementRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            webhook_sender: Where settlement outcomes are delivered
            settlement_delay: Seconds between acceptance and settlement
            registry: Owner of the background settlements
            logger: Logger to report on (defaults to "payment_simulator")
        """
        self.webhook_sender = webhook_sender
        self.settlement_delay = settlement_delay
        self.registry = registry or SettlementRegistry()
        self.logger = logger or logging.getLogger("payment_simulator")

    def process_payment(self, request: PaymentRequest) -> PaymentResponse:
        """Accept a payment and schedule its settlement. Never waits for it."""
        payment_id = str(uuid4())
        self.logger.info(
            f"Payment {payment_id} accepted: booking={request.booking_id} "
            f"amount={request.amount:.2f} {request.currency}"
        )
        self.registry.spawn(payment_id, lambda: self._settle_later(payment_id, request))
        return PaymentResponse(
            payment_id=payment_id,
            status=SettlementStatus.PROCESSING,
            message="payment is being processed",
        )

    def settle(self, payment_id: str, request: PaymentRequest) -> PaymentWebhook:
        """Decide the outcome of a payment and build its webhook."""
        status = decide_outcome(request.amount)
        return PaymentWebhook(
            payment_id=payment_id,
            booking_id=request.booking_id,
            status=status.value,
            amount=request.amount,
            processed_at=datetime.now(timezone.utc).isoformat(),
        )

    def _settle_later(self, payment_id: str, request: PaymentRequest) -> None:
        if self.settlement_delay > 0:
            time.sleep(self.settlement_delay)

        webhook = self.settle(payment_id, request)
        self.logger.info(f"Payment {payment_id} settled: {webhook.status}")

        try:
            self.webhook_sender.deliver(webhook)
        except AsyncDeliveryError as e:
            self.logger.error(f"Failed to send payment webhook for {payment_id}: {e}")

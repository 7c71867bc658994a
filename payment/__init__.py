"""
Payment service simulator.

- PaymentSimulator: immediate acceptance, background settlement
- SettlementRegistry: owner of in-flight settlements
- WebhookSender: how settlement outcomes reach the booking service
"""

from payment.simulator import PaymentSimulator, SettlementRegistry, decide_outcome
from payment.webhook import (
    HttpWebhookSender,
    LocalWebhookSender,
    RecordingWebhookSender,
    WebhookSender,
)

__all__ = [
    "PaymentSimulator",
    "SettlementRegistry",
    "decide_outcome",
    "HttpWebhookSender",
    "LocalWebhookSender",
    "RecordingWebhookSender",
    "WebhookSender",
]

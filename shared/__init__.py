"""
Shared infrastructure for the booking pipeline services.

This package contains code used by every service:
- Domain models (Booking, BookingEvent, payment and notification shapes)
- Error taxonomy
- Settings and logging setup
- Mock notification channels (Email, SMS, Telegram)
- Notification templates
"""

from shared.models import (
    Booking,
    BookingEvent,
    BookingRequest,
    BookingStatus,
    Hotel,
    NotificationChannelType,
    NotificationRequest,
    PaymentRequest,
    PaymentResponse,
    PaymentStatus,
    PaymentWebhook,
    Room,
    SettlementStatus,
)
from shared.channels import (
    EmailChannel,
    NotificationChannels,
    NotificationResult,
    SMSChannel,
    TelegramChannel,
)
from shared.config import Settings, configure_logging, get_settings

__all__ = [
    "Booking",
    "BookingEvent",
    "BookingRequest",
    "BookingStatus",
    "Hotel",
    "NotificationChannelType",
    "NotificationRequest",
    "PaymentRequest",
    "PaymentResponse",
    "PaymentStatus",
    "PaymentWebhook",
    "Room",
    "SettlementStatus",
    "EmailChannel",
    "NotificationChannels",
    "NotificationResult",
    "SMSChannel",
    "TelegramChannel",
    "Settings",
    "configure_logging",
    "get_settings",
]

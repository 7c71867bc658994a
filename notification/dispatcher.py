"""
Notification dispatcher for booking-created events.

For every booking the dispatcher sends two notifications:
1. a confirmation to the customer
2. a new-booking notice to the hotel owner (looked up in the hotel directory)

This is a best-effort fan-out. No step blocks another: a failed customer
send does not stop the owner notice, a failed owner lookup only skips the
owner notice, and failures are logged, never retried. Every event counts as
handled, so the event log never redelivers one.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from booking.hotel_directory import HotelDirectory
from events.event_log import LogRecord
from shared.channels import NotificationResult
from shared.models import BookingEvent
from shared.templates import NotificationType, format_stay_date, render_notification


class NotificationChannel(Protocol):
    """Anything that can send a message on a named channel."""

    def send(
        self,
        channel: str,
        recipient: str,
        subject: Optional[str],
        body: str,
    ) -> NotificationResult:
        ...


@dataclass
class DispatchReport:
    """What happened while handling one event."""
    booking_id: str
    attempted: int = 0
    sent: int = 0
    errors: list[str] = field(default_factory=list)


class NotificationDispatcher:
    """
    Turns booking events into customer and owner notifications.

    Example:
        dispatcher = NotificationDispatcher(channels, hotel_directory)
        consumer = EventConsumer(log, "booking-created", "notification-service",
                                 dispatcher.handle_record)
        consumer.run(stop_event)
    """

    def __init__(
        self,
        channel: NotificationChannel,
        hotel_directory: HotelDirectory,
        channel_name: str = "email",
        currency: str = "RUB",
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            channel: Where notifications are sent
            hotel_directory: Used to find the hotel owner
            channel_name: Channel used for both notifications
            currency: Shown next to prices in messages
            logger: Logger to report on (defaults to "notification_dispatcher")
        """
        self.channel = channel
        self.hotel_directory = hotel_directory
        self.channel_name = channel_name
        self.currency = currency
        self.logger = logger or logging.getLogger("notification_dispatcher")

    # =========================================================================
    # Event log entry points
    # =========================================================================

    def handle_record(self, record: LogRecord) -> None:
        """Handler for EventConsumer. Never raises."""
        self.handle_message(record.value)

    def handle_message(self, raw: str) -> Optional[DispatchReport]:
        """
        Decode a raw event payload and dispatch it.

        Payloads that are not valid booking events are logged and dropped.
        """
        try:
            event = BookingEvent.model_validate(json.loads(raw))
        except ValueError as e:
            self.logger.error(f"Failed to decode booking event: {e}")
            return None

        self.logger.info(f"Received booking event: booking={event.booking_id}")
        return self.handle_event(event)

    # =========================================================================
    # Fan-out
    # =========================================================================

    def handle_event(self, event: BookingEvent) -> DispatchReport:
        """Send the customer and owner notifications for one booking."""
        report = DispatchReport(booking_id=event.booking_id)
        context = self._context(event)

        # Step 1: customer
        self._send(
            report,
            NotificationType.BOOKING_CONFIRMED,
            recipient=event.user_id,
            context=context,
            audience="client",
        )

        # Step 2: owner lookup
        try:
            owner_id = self.hotel_directory.get_owner_id(event.hotel_id)
        except Exception as e:
            self.logger.error(f"Failed to get hotel owner ID for hotel {event.hotel_id}: {e}")
            report.errors.append(f"owner lookup: {e}")
            return report

        # Step 3: owner
        self._send(
            report,
            NotificationType.NEW_BOOKING_FOR_OWNER,
            recipient=owner_id,
            context=context,
            audience="hotelier",
        )
        return report

    def _context(self, event: BookingEvent) -> dict:
        return {
            "booking_id": event.booking_id,
            "user_id": event.user_id,
            "hotel_id": event.hotel_id,
            "total_price": event.total_price,
            "currency": self.currency,
            "check_in": format_stay_date(event.check_in_date),
            "check_out": format_stay_date(event.check_out_date),
        }

    def _send(
        self,
        report: DispatchReport,
        notification_type: NotificationType,
        recipient: str,
        context: dict,
        audience: str,
    ) -> None:
        report.attempted += 1
        try:
            subject, body = render_notification(notification_type, self.channel_name, **context)
            result = self.channel.send(self.channel_name, recipient, subject, body)
        except Exception as e:
            self.logger.error(f"Failed to send notification to {audience} {recipient}: {e}")
            report.errors.append(f"{audience}: {e}")
            return

        if not result.success:
            self.logger.error(f"Failed to send notification to {audience} {recipient}: {result.error}")
            report.errors.append(f"{audience}: {result.error}")
            return

        report.sent += 1
        self.logger.info(f"Notified {audience} {recipient} about booking {report.booking_id}")

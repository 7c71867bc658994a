"""
Notification message templates for booking notifications.

Templates are plain strings with {variable} placeholders. Each notification
type has an email variant (subject + longer body) and a short variant used
for SMS and Telegram.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class NotificationType(str, Enum):
    """Notifications the pipeline sends when a booking is created."""
    BOOKING_CONFIRMED = "booking_confirmed"   # to the customer
    NEW_BOOKING_FOR_OWNER = "new_booking_for_owner"  # to the hotel owner


@dataclass
class NotificationTemplate:
    """A notification template with email and short-message variants."""
    notification_type: NotificationType
    email_subject: str
    email_body: str
    short_body: str

    def render_email(self, **kwargs) -> tuple[str, str]:
        """Returns (subject, body)."""
        return (
            self.email_subject.format(**kwargs),
            self.email_body.format(**kwargs),
        )

    def render_short(self, **kwargs) -> str:
        return self.short_body.format(**kwargs)


TEMPLATES: dict[NotificationType, NotificationTemplate] = {

    NotificationType.BOOKING_CONFIRMED: NotificationTemplate(
        notification_type=NotificationType.BOOKING_CONFIRMED,
        email_subject="Booking confirmed",
        email_body="""Your booking is confirmed!

Booking ID: {booking_id}
Hotel: {hotel_id}
Total: {total_price:.2f} {currency}
Check-in: {check_in}
Check-out: {check_out}

Thank you for choosing our service!""",
        short_body="Booking {booking_id} confirmed: {check_in} - {check_out}, {total_price:.2f} {currency}.",
    ),

    NotificationType.NEW_BOOKING_FOR_OWNER: NotificationTemplate(
        notification_type=NotificationType.NEW_BOOKING_FOR_OWNER,
        email_subject="New booking at your hotel",
        email_body="""New booking at your hotel!

Booking ID: {booking_id}
Guest: {user_id}
Hotel: {hotel_id}
Total: {total_price:.2f} {currency}
Check-in: {check_in}
Check-out: {check_out}""",
        short_body="New booking {booking_id} by {user_id}: {check_in} - {check_out}, {total_price:.2f} {currency}.",
    ),
}


def get_template(notification_type: NotificationType) -> Optional[NotificationTemplate]:
    """Get a template by notification type."""
    return TEMPLATES.get(notification_type)


def render_notification(
    notification_type: NotificationType,
    channel: str,
    **context
) -> tuple[Optional[str], str]:
    """
    Render a notification for a specific channel.

    Returns:
        For email: (subject, body)
        For sms: (None, body)
        For telegram: (subject, short body)

    Raises:
        ValueError: If template not found or channel invalid
    """
    template = get_template(notification_type)
    if not template:
        raise ValueError(f"No template found for notification type: {notification_type}")

    if channel == "email":
        return template.render_email(**context)
    elif channel == "sms":
        return (None, template.render_short(**context))
    elif channel == "telegram":
        return (template.email_subject.format(**context), template.render_short(**context))
    else:
        raise ValueError(f"Unknown channel: {channel}")


def format_stay_date(value: datetime) -> str:
    """Format a check-in/check-out timestamp for humans."""
    return value.strftime("%Y-%m-%d %H:%M")

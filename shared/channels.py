"""
Mock notification channels used by the delivery service.

These channels simulate sending email, SMS and Telegram messages by logging
them. Real provider integrations are out of scope; what matters here is the
send contract the notification pipeline relies on.

Design decisions:
- All sends are logged for visibility
- Channels track sent messages for test assertions
- Failures are reported in the result, not raised
- Channel failures can be simulated for testing
"""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from shared.models import NotificationChannelType

logger = logging.getLogger("channels")


@dataclass
class NotificationResult:
    """
    Result of a notification send attempt.

    Captures success/failure and metadata for debugging and testing.
    """
    success: bool
    channel: NotificationChannelType
    recipient: str
    subject: Optional[str]  # Email and Telegram only
    body: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: Optional[str] = None

    def __str__(self) -> str:
        status = "✓" if self.success else "✗"
        if self.subject:
            return f"{status} {self.channel.value.upper()} to {self.recipient}: {self.subject}"
        return f"{status} {self.channel.value.upper()} to {self.recipient}: {self.body[:50]}..."


class _MockChannel:
    """Shared bookkeeping for the mock channels."""

    channel_type: NotificationChannelType

    def __init__(self, fail_rate: float = 0.0):
        """
        Args:
            fail_rate: Probability of send failure (0.0 to 1.0), for testing.
        """
        self.fail_rate = fail_rate
        self.sent_messages: list[NotificationResult] = []

    def _should_fail(self) -> bool:
        return random.random() < self.fail_rate

    def _record(
        self,
        recipient: str,
        subject: Optional[str],
        body: str,
        error: Optional[str] = None,
    ) -> NotificationResult:
        result = NotificationResult(
            success=error is None,
            channel=self.channel_type,
            recipient=recipient,
            subject=subject,
            body=body,
            error=error,
        )
        self.sent_messages.append(result)
        return result

    def get_sent_count(self) -> int:
        """Get the number of messages sent (for testing)."""
        return len(self.sent_messages)

    def get_successful_sends(self) -> list[NotificationResult]:
        """Get all successful sends."""
        return [m for m in self.sent_messages if m.success]

    def clear_history(self):
        """Clear sent message history (useful between tests)."""
        self.sent_messages.clear()

    def find_message_to(self, recipient: str) -> Optional[NotificationResult]:
        """Find a message sent to a specific recipient."""
        for msg in self.sent_messages:
            if msg.recipient == recipient:
                return msg
        return None


class EmailChannel(_MockChannel):
    """Mock email channel."""

    channel_type = NotificationChannelType.EMAIL

    def send(self, to: str, subject: str, body: str) -> NotificationResult:
        """
        Send an email (mock implementation).

        Args:
            to: Recipient address or user id
            subject: Email subject line
            body: Email body content

        Returns:
            NotificationResult indicating success/failure
        """
        if self._should_fail():
            result = self._record(to, subject, body, error="Simulated email delivery failure")
            logger.error(f"[EMAIL FAILED] To: {to} | Subject: {subject} | Error: {result.error}")
            return result

        logger.info(f"[EMAIL] To: {to} | Subject: {subject}")
        logger.debug(f"[EMAIL BODY] {body}")
        return self._record(to, subject, body)


class SMSChannel(_MockChannel):
    """
    Mock SMS channel.

    SMS messages are typically shorter than emails.
    """

    channel_type = NotificationChannelType.SMS

    # SMS typically have character limits
    MAX_LENGTH = 160

    def send(self, to: str, message: str) -> NotificationResult:
        """Send an SMS (mock implementation)."""
        if len(message) > self.MAX_LENGTH:
            logger.warning(
                f"[SMS] Message length ({len(message)}) exceeds {self.MAX_LENGTH} chars, "
                "may be split into multiple messages"
            )

        if self._should_fail():
            result = self._record(to, None, message, error="Simulated SMS delivery failure")
            logger.error(f"[SMS FAILED] To: {to} | Error: {result.error}")
            return result

        logger.info(f"[SMS] To: {to} | Message: {message}")
        return self._record(to, None, message)


class TelegramChannel(_MockChannel):
    """
    Mock Telegram channel.

    Recipients are numeric chat ids. Without a bot token every send fails,
    the same way the real delivery service behaves when unconfigured.
    """

    channel_type = NotificationChannelType.TELEGRAM

    def __init__(self, bot_token: Optional[str] = None, fail_rate: float = 0.0):
        super().__init__(fail_rate=fail_rate)
        self.bot_token = bot_token

    def send(self, chat_id: str, subject: Optional[str], message: str) -> NotificationResult:
        """Send a Telegram message (mock implementation)."""
        if not self.bot_token:
            result = self._record(chat_id, subject, message, error="telegram bot not configured")
            logger.error(f"[TELEGRAM FAILED] To: {chat_id} | Error: {result.error}")
            return result

        try:
            int(chat_id)
        except ValueError:
            result = self._record(chat_id, subject, message, error=f"invalid telegram chat ID: {chat_id}")
            logger.error(f"[TELEGRAM FAILED] To: {chat_id} | Error: {result.error}")
            return result

        text = f"{subject}\n\n{message}" if subject else message
        if self._should_fail():
            result = self._record(chat_id, subject, text, error="Simulated Telegram delivery failure")
            logger.error(f"[TELEGRAM FAILED] To: {chat_id} | Error: {result.error}")
            return result

        logger.info(f"[TELEGRAM] To: {chat_id} | Subject: {subject}")
        return self._record(chat_id, subject, text)


class NotificationChannels:
    """
    Facade for all notification channels.

    Provides the send(channel, recipient, subject, body) contract the
    notification dispatcher depends on, and keeps one instance per channel.
    """

    def __init__(
        self,
        email_fail_rate: float = 0.0,
        sms_fail_rate: float = 0.0,
        telegram_bot_token: Optional[str] = None,
    ):
        self.email = EmailChannel(fail_rate=email_fail_rate)
        self.sms = SMSChannel(fail_rate=sms_fail_rate)
        self.telegram = TelegramChannel(bot_token=telegram_bot_token)

    def send(
        self,
        channel: str,
        recipient: str,
        subject: Optional[str],
        body: str,
    ) -> NotificationResult:
        """
        Send via a named channel.

        Args:
            channel: "email", "sms" or "telegram"
            recipient: Address, phone number, user id or chat id
            subject: Subject line (ignored for SMS)
            body: Message content

        Returns:
            NotificationResult

        Raises:
            ValueError: If channel is not recognized
        """
        if channel == NotificationChannelType.EMAIL.value:
            return self.email.send(recipient, subject or "(no subject)", body)
        elif channel == NotificationChannelType.SMS.value:
            return self.sms.send(recipient, body)
        elif channel == NotificationChannelType.TELEGRAM.value:
            return self.telegram.send(recipient, subject, body)
        else:
            raise ValueError(f"Unknown channel: {channel}")

    def get_all_sent_messages(self) -> list[NotificationResult]:
        """Get all sent messages across all channels."""
        return self.email.sent_messages + self.sms.sent_messages + self.telegram.sent_messages

    def get_total_sent_count(self) -> int:
        """Get total number of messages sent across all channels."""
        return len(self.get_all_sent_messages())

    def clear_all_history(self):
        """Clear history for all channels."""
        self.email.clear_history()
        self.sms.clear_history()
        self.telegram.clear_history()

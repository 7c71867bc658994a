"""
Publishes booking-created events to the event log.

The booking id is the partition key, so all events of one booking stay in
order on one partition.
"""

import logging
from typing import Optional

from events.event_log import EventLog, LogRecord
from shared.errors import PublishError
from shared.models import BookingEvent


class EventPublisher:
    """Serializes BookingEvents and appends them to a topic."""

    def __init__(
        self,
        event_log: EventLog,
        topic: str,
        logger: Optional[logging.Logger] = None,
    ):
        self.event_log = event_log
        self.topic = topic
        self.logger = logger or logging.getLogger("event_publisher")

    def publish(self, event: BookingEvent) -> LogRecord:
        """
        Publish one event.

        Raises:
            PublishError: The event log refused the record
        """
        try:
            record = self.event_log.publish(
                self.topic,
                event.booking_id,
                event.model_dump(mode="json"),
            )
        except PublishError:
            raise
        except Exception as e:
            raise PublishError(f"failed to publish {event.event_type} for {event.booking_id}: {e}") from e

        self.logger.info(f"Published {event.event_type} for booking {event.booking_id}")
        return record

"""
Event log infrastructure.

- EventLog: append-only, key-partitioned log with consumer groups
- EventConsumer: the single consumption loop a service runs
- booking_events: event type and topic names, event constructors
"""

from events.event_log import EventConsumer, EventLog, LogRecord
from events.booking_events import EventTypes, Topics, booking_created

__all__ = [
    "EventConsumer",
    "EventLog",
    "LogRecord",
    "EventTypes",
    "Topics",
    "booking_created",
]

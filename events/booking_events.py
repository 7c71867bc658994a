"""
Booking event definitions.

Events are named in past tense and carry a full snapshot of the booking, so
subscribers never need to query the booking service back.
"""

from shared.models import Booking, BookingEvent


class EventTypes:
    """Constants for event type names."""
    BOOKING_CREATED = "booking.created"


class Topics:
    """Default topic names on the event log."""
    BOOKING_CREATED = "booking-created"


def booking_created(booking: Booking) -> BookingEvent:
    """
    Create a booking.created event.

    Published exactly once, after the booking was persisted (and payment
    was requested, when a payment gateway is configured).
    """
    return BookingEvent.from_booking(booking, EventTypes.BOOKING_CREATED)

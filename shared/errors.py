"""
Error taxonomy for the booking pipeline.

Three families, each with its own handling rule:
- ValidationError: bad input. Returned to the caller immediately, never retried.
- DependencyError: a collaborator call failed (pricing, hotel, payment, event log).
  Surfaced to the caller, not retried, and nothing already persisted is rolled back.
- AsyncDeliveryError: a webhook or notification send failed. Logged by whoever
  catches it and never surfaced to a caller.
"""


class BookingSystemError(Exception):
    """Base error for everything raised by the booking pipeline."""


# =============================================================================
# Validation
# =============================================================================

class ValidationError(BookingSystemError):
    """Raised when a request fails input validation."""


class InvalidDateRange(ValidationError):
    """Raised when check-in is not strictly before check-out."""

    def __init__(self, check_in, check_out):
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"check-in date must be before check-out date "
            f"(check_in={check_in.isoformat()}, check_out={check_out.isoformat()})"
        )


class InvalidStatus(ValidationError):
    """Raised when a payment status is not one of the known values."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"invalid payment status: {status!r}")


class BookingNotFound(BookingSystemError):
    """Raised when a booking id does not exist in the store."""

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"booking not found: {booking_id}")


# =============================================================================
# Collaborator failures
# =============================================================================

class DependencyError(BookingSystemError):
    """Raised when a synchronous call to a collaborator fails."""


class RoomNotFound(DependencyError):
    """Raised when the hotel directory has no such room (or hotel)."""

    def __init__(self, hotel_id: str, room_id: str):
        self.hotel_id = hotel_id
        self.room_id = room_id
        super().__init__(f"room {room_id} not found in hotel {hotel_id}")


class HotelNotFound(DependencyError):
    """Raised when the hotel directory has no such hotel."""

    def __init__(self, hotel_id: str):
        self.hotel_id = hotel_id
        super().__init__(f"hotel not found: {hotel_id}")


class ServiceUnavailable(DependencyError):
    """Raised when a collaborator service cannot be reached or misbehaves."""


class PaymentError(DependencyError):
    """Raised when the payment gateway rejects or fails a payment request."""


class PublishError(DependencyError):
    """Raised when a booking event cannot be published."""


class EventLogError(PublishError):
    """Raised when the event log cannot serialize or append a record."""


# =============================================================================
# Fire-and-forget delivery
# =============================================================================

class AsyncDeliveryError(BookingSystemError):
    """Raised by out-of-band deliveries. Callers log it and move on."""


class WebhookDeliveryError(AsyncDeliveryError):
    """Raised when a payment webhook could not be delivered."""


class NotificationDeliveryError(AsyncDeliveryError):
    """Raised when a notification could not be handed to the delivery service."""

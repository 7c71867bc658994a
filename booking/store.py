"""
Booking persistence.

BookingStore is the contract the orchestrator depends on; every operation is
a single round trip. InMemoryBookingStore is the implementation this
repository ships: it keeps bookings in a dict guarded by a lock.
"""

import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from shared.models import Booking


class BookingStore(ABC):
    """Storage contract for bookings."""

    @abstractmethod
    def create(self, booking: Booking) -> Booking:
        """Insert a new booking. Raises if the id already exists."""

    @abstractmethod
    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        """Return the booking or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Booking]:
        """Bookings of a user, newest first."""

    @abstractmethod
    def list_by_hotel(self, hotel_id: str) -> list[Booking]:
        """Bookings for a hotel, newest first."""

    @abstractmethod
    def update_status(self, booking_id: str, status: str) -> Optional[Booking]:
        """Set the booking status. Returns the updated booking or None."""

    @abstractmethod
    def update_payment_status(self, booking_id: str, payment_status: str) -> Optional[Booking]:
        """Set the payment status. Returns the updated booking or None."""


class InMemoryBookingStore(BookingStore):
    """
    Thread-safe in-memory booking store.

    Callers always get copies, never the stored instances.

    Also tracks how many writes it has accepted, which tests use to prove
    that a failed booking attempt left no trace.
    """

    def __init__(self):
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()
        self.write_count = 0

    def create(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id in self._bookings:
                raise ValueError(f"booking already exists: {booking.id}")
            self._bookings[booking.id] = booking.model_copy()
            self.write_count += 1
        return booking.model_copy()

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy() if booking else None

    def list_by_user(self, user_id: str) -> list[Booking]:
        with self._lock:
            return self._newest_first(b for b in self._bookings.values() if b.user_id == user_id)

    def list_by_hotel(self, hotel_id: str) -> list[Booking]:
        with self._lock:
            return self._newest_first(b for b in self._bookings.values() if b.hotel_id == hotel_id)

    def update_status(self, booking_id: str, status: str) -> Optional[Booking]:
        return self._update(booking_id, status=status)

    def update_payment_status(self, booking_id: str, payment_status: str) -> Optional[Booking]:
        return self._update(booking_id, payment_status=payment_status)

    def get_all(self) -> list[Booking]:
        """Get all bookings, newest first."""
        with self._lock:
            return self._newest_first(self._bookings.values())

    def _update(self, booking_id: str, **changes) -> Optional[Booking]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if not booking:
                return None
            updated = booking.model_copy(
                update={**changes, "updated_at": datetime.now(timezone.utc)}
            )
            self._bookings[booking_id] = updated
            self.write_count += 1
            return updated.model_copy()

    @staticmethod
    def _newest_first(bookings) -> list[Booking]:
        return [b.model_copy() for b in sorted(bookings, key=lambda b: b.created_at, reverse=True)]

"""
Pricing for new bookings.

The nightly rate is looked up fresh from the hotel directory on every
booking; nothing is cached. The total is rate x nights, where nights counts
whole 24-hour periods of the stay (truncated) with a minimum of one.
"""

import logging
from datetime import datetime
from typing import Optional

from booking.hotel_directory import HotelDirectory

SECONDS_PER_NIGHT = 24 * 60 * 60


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """
    Whole 24-hour periods between check-in and check-out, at least 1.

    A 36-hour stay is one night; a 2-hour stay is still charged as one.
    """
    hours = (check_out - check_in).total_seconds() / 3600
    return max(int(hours / 24), 1)


def calculate_total_price(nightly_rate: float, check_in: datetime, check_out: datetime) -> float:
    return nightly_rate * count_nights(check_in, check_out)


class PricingResolver:
    """Resolves the nightly rate of a room through the hotel directory."""

    def __init__(
        self,
        hotel_directory: HotelDirectory,
        logger: Optional[logging.Logger] = None,
    ):
        self.hotel_directory = hotel_directory
        self.logger = logger or logging.getLogger("pricing")

    def get_nightly_rate(self, hotel_id: str, room_id: str) -> float:
        """
        Current nightly rate.

        Errors from the directory (RoomNotFound, ServiceUnavailable) are
        passed through unchanged.
        """
        rate = self.hotel_directory.get_room_price(hotel_id, room_id)
        self.logger.debug(f"Resolved rate for hotel={hotel_id} room={room_id}: {rate:.2f}")
        return rate

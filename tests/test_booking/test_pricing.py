"""
Tests for night counting and price resolution.
"""

from datetime import timedelta

import pytest

from booking.pricing import PricingResolver, calculate_total_price, count_nights
from shared.errors import RoomNotFound


class TestCountNights:
    """Nights are whole 24-hour periods, truncated, at least one."""

    @pytest.mark.parametrize("hours, nights", [
        (48, 2),
        (36, 1),
        (24, 1),
        (2, 1),
        (71, 2),
        (72, 3),
    ])
    def test_count_nights(self, check_in, hours, nights):
        assert count_nights(check_in, check_in + timedelta(hours=hours)) == nights

    def test_total_price(self, check_in, check_out):
        assert calculate_total_price(5000.0, check_in, check_out) == 10000.0

    def test_short_stay_charged_one_night(self, check_in):
        assert calculate_total_price(5000.0, check_in, check_in + timedelta(hours=2)) == 5000.0


class TestPricingResolver:
    """Tests for nightly rate lookups."""

    def test_rate_from_directory(self, hotel_directory):
        assert PricingResolver(hotel_directory).get_nightly_rate("hotel-1", "room-1") == 5000.0

    def test_unknown_room_passes_through(self, hotel_directory):
        with pytest.raises(RoomNotFound):
            PricingResolver(hotel_directory).get_nightly_rate("hotel-1", "room-404")

    def test_rate_is_not_cached(self, hotel_directory):
        """A price change in the directory applies to the very next lookup."""
        resolver = PricingResolver(hotel_directory)
        assert resolver.get_nightly_rate("hotel-1", "room-1") == 5000.0

        hotel = hotel_directory.get_hotels()[0]
        hotel.rooms[0].price_per_night = 6000.0

        assert resolver.get_nightly_rate("hotel-1", "room-1") == 6000.0

"""
Tests for domain models.

These tests verify validation and the small amount of behavior the
models carry.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from shared.models import (
    Booking,
    BookingEvent,
    BookingRequest,
    Hotel,
    NotificationRequest,
    PaymentRequest,
    PaymentResponse,
    PaymentStatus,
    Room,
)


class TestPaymentStatus:
    """Tests for PaymentStatus.parse."""

    @pytest.mark.parametrize("raw", ["paid", "PAID", "Paid", "  paid "])
    def test_parse_is_case_insensitive(self, raw):
        assert PaymentStatus.parse(raw) == PaymentStatus.PAID

    @pytest.mark.parametrize("raw", ["", "settled", "payed", None])
    def test_parse_unknown_returns_none(self, raw):
        assert PaymentStatus.parse(raw) is None

    def test_all_known_values(self):
        assert {s.value for s in PaymentStatus} == {"pending", "paid", "failed", "refunded"}


class TestBookingRequest:
    """Tests for BookingRequest."""

    def test_naive_dates_are_utc(self):
        request = BookingRequest(
            user_id="u",
            hotel_id="h",
            room_id="r",
            check_in_date="2030-06-01T14:00:00",
            check_out_date="2030-06-03T12:00:00",
        )

        assert request.check_in_date.tzinfo is not None
        assert request.check_in_date == datetime(2030, 6, 1, 14, 0, tzinfo=timezone.utc)

    def test_server_owned_fields_are_ignored(self):
        request = BookingRequest.model_validate({
            "user_id": "u",
            "hotel_id": "h",
            "room_id": "r",
            "check_in_date": "2030-06-01T14:00:00Z",
            "check_out_date": "2030-06-03T12:00:00Z",
            "total_price": 1.0,
            "status": "cancelled",
        })

        assert not hasattr(request, "total_price")

    def test_missing_user_rejected(self):
        with pytest.raises(ValidationError):
            BookingRequest(
                user_id="",
                hotel_id="h",
                room_id="r",
                check_in_date="2030-06-01T14:00:00Z",
                check_out_date="2030-06-03T12:00:00Z",
            )


class TestBooking:
    """Tests for the Booking model."""

    def test_defaults(self, check_in, check_out):
        booking = Booking(
            user_id="u",
            hotel_id="h",
            room_id="r",
            check_in_date=check_in,
            check_out_date=check_out,
            total_price=100.0,
        )

        assert booking.id
        assert booking.status == "confirmed"
        assert booking.payment_status == "pending"

    def test_negative_price_rejected(self, check_in, check_out):
        with pytest.raises(ValidationError):
            Booking(
                user_id="u",
                hotel_id="h",
                room_id="r",
                check_in_date=check_in,
                check_out_date=check_out,
                total_price=-1.0,
            )


class TestBookingEvent:
    """Tests for BookingEvent."""

    def test_from_booking_copies_snapshot(self, check_in, check_out):
        booking = Booking(
            user_id="u",
            hotel_id="h",
            room_id="r",
            check_in_date=check_in,
            check_out_date=check_out,
            total_price=10000.0,
        )

        event = BookingEvent.from_booking(booking, "booking.created")

        assert event.booking_id == booking.id
        assert event.total_price == 10000.0
        assert event.check_in_date == check_in
        assert event.event_type == "booking.created"

    def test_is_immutable(self, check_in, check_out):
        event = BookingEvent(
            booking_id="b",
            user_id="u",
            hotel_id="h",
            room_id="r",
            check_in_date=check_in,
            check_out_date=check_out,
            total_price=1.0,
            event_type="booking.created",
        )

        with pytest.raises(ValidationError):
            event.total_price = 2.0


class TestPaymentModels:
    """Tests for payment request/response shapes."""

    def test_currency_defaults_to_rub(self):
        assert PaymentRequest(booking_id="b", amount=1.0).currency == "RUB"

    def test_response_defaults_to_processing(self):
        response = PaymentResponse(payment_id="p")

        assert response.status == "processing"


class TestHotel:
    """Tests for Hotel.find_room."""

    def test_find_room(self):
        hotel = Hotel(id="h", owner_id="o", rooms=[Room(id="r1", price_per_night=10.0)])

        assert hotel.find_room("r1").price_per_night == 10.0
        assert hotel.find_room("missing") is None


class TestNotificationRequest:
    """Tests for the delivery service request shape."""

    def test_defaults_to_email(self):
        request = NotificationRequest(recipient="user-1", message="hi")

        assert request.channel == "email"

    def test_unknown_channel_rejected(self):
        with pytest.raises(ValidationError):
            NotificationRequest(channel="pigeon", recipient="user-1", message="hi")

    def test_subject_omitted_from_wire_when_none(self):
        request = NotificationRequest(channel="sms", recipient="+7900", message="hi")

        assert "subject" not in request.model_dump(exclude_none=True)

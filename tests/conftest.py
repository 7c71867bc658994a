"""
Shared pytest fixtures for the booking pipeline tests.

These fixtures provide consistent test data and fresh state for every test.
"""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from booking.event_publisher import EventPublisher
from booking.hotel_directory import StaticHotelDirectory
from booking.orchestrator import BookingOrchestrator
from booking.pricing import PricingResolver
from booking.store import InMemoryBookingStore
from events.booking_events import Topics
from events.event_log import EventLog
from payment.simulator import PaymentSimulator
from payment.webhook import RecordingWebhookSender
from shared.channels import EmailChannel, NotificationChannels, SMSChannel
from shared.models import BookingRequest, Hotel, Room


@pytest.fixture
def data_dir() -> Path:
    """Path to the fixture data directory."""
    return Path(__file__).parent.parent / "data"


@pytest.fixture
def email_channel() -> EmailChannel:
    """Fresh EmailChannel for each test."""
    return EmailChannel(fail_rate=0.0)


@pytest.fixture
def sms_channel() -> SMSChannel:
    """Fresh SMSChannel for each test."""
    return SMSChannel(fail_rate=0.0)


@pytest.fixture
def channels() -> NotificationChannels:
    """Fresh NotificationChannels facade for each test."""
    return NotificationChannels(email_fail_rate=0.0, sms_fail_rate=0.0)


# =============================================================================
# Hotel Fixtures
# =============================================================================

@pytest.fixture
def hotel_directory() -> StaticHotelDirectory:
    """
    Directory with one hotel.

    hotel-1 (owner-1): room-1 at 5000/night, room-free at 0/night.
    """
    return StaticHotelDirectory([
        Hotel(
            id="hotel-1",
            name="Test Hotel",
            owner_id="owner-1",
            rooms=[
                Room(id="room-1", price_per_night=5000.0),
                Room(id="room-free", price_per_night=0.0),
            ],
        ),
    ])


# =============================================================================
# Booking Fixtures
# =============================================================================

@pytest.fixture
def check_in() -> datetime:
    return datetime(2030, 6, 1, 14, 0, tzinfo=timezone.utc)


@pytest.fixture
def check_out(check_in: datetime) -> datetime:
    """Two nights after check_in."""
    return check_in + timedelta(days=2)


@pytest.fixture
def booking_request(check_in: datetime, check_out: datetime) -> BookingRequest:
    """Two-night request for room-1 (5000/night)."""
    return BookingRequest(
        user_id="user-1",
        hotel_id="hotel-1",
        room_id="room-1",
        check_in_date=check_in,
        check_out_date=check_out,
    )


@pytest.fixture
def store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def event_log() -> EventLog:
    """In-memory event log (no file backing)."""
    return EventLog(partitions=3)


@pytest.fixture
def publisher(event_log: EventLog) -> EventPublisher:
    return EventPublisher(event_log, Topics.BOOKING_CREATED)


@pytest.fixture
def orchestrator(store, hotel_directory, publisher) -> BookingOrchestrator:
    """Orchestrator without a payment gateway."""
    return BookingOrchestrator(
        store=store,
        pricing=PricingResolver(hotel_directory),
        publisher=publisher,
    )


# =============================================================================
# Payment Fixtures
# =============================================================================

@pytest.fixture
def webhook_sender() -> RecordingWebhookSender:
    return RecordingWebhookSender()


@pytest.fixture
def simulator(webhook_sender: RecordingWebhookSender) -> PaymentSimulator:
    """Simulator that settles immediately."""
    return PaymentSimulator(webhook_sender, settlement_delay=0)

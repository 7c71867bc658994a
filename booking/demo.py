"""
Demonstration scripts for the booking pipeline.

Every service runs in this one process: the booking orchestrator, the
payment simulator (webhooks applied directly to the orchestrator) and the
notification dispatcher reading the event log.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from booking.event_publisher import EventPublisher
from booking.hotel_directory import StaticHotelDirectory
from booking.orchestrator import BookingOrchestrator
from booking.payment_gateway import LocalPaymentGateway
from booking.pricing import PricingResolver
from booking.store import InMemoryBookingStore
from events.booking_events import Topics
from events.event_log import EventLog
from notification.dispatcher import NotificationDispatcher
from payment.simulator import PaymentSimulator
from payment.webhook import LocalWebhookSender
from shared.channels import NotificationChannels
from shared.config import configure_logging, get_settings
from shared.errors import BookingSystemError, ServiceUnavailable
from shared.models import BookingRequest

NOTIFICATION_GROUP = "notification-service"


class _OwnerLookupDownDirectory(StaticHotelDirectory):
    """Prices work, owner lookups fail."""

    def get_owner_id(self, hotel_id: str) -> str:
        raise ServiceUnavailable("hotel service timed out")


def _build_pipeline(hotel_directory: Optional[StaticHotelDirectory] = None, settlement_delay: float = 0.2):
    settings = get_settings()
    hotel_directory = hotel_directory or StaticHotelDirectory.from_json(settings.data_dir)
    store = InMemoryBookingStore()
    event_log = EventLog(partitions=settings.event_log_partitions)
    channels = NotificationChannels()

    orchestrator = BookingOrchestrator(
        store=store,
        pricing=PricingResolver(hotel_directory),
        publisher=EventPublisher(event_log, Topics.BOOKING_CREATED),
    )
    simulator = PaymentSimulator(LocalWebhookSender(orchestrator), settlement_delay=settlement_delay)
    orchestrator.payment_gateway = LocalPaymentGateway(simulator, currency=settings.currency)

    dispatcher = NotificationDispatcher(channels, hotel_directory, currency=settings.currency)
    return {
        "orchestrator": orchestrator,
        "simulator": simulator,
        "dispatcher": dispatcher,
        "event_log": event_log,
        "channels": channels,
        "store": store,
        "hotel_directory": hotel_directory,
    }


def _stay(nights: int) -> tuple[datetime, datetime]:
    check_in = datetime.now(timezone.utc).replace(hour=14, minute=0, second=0, microsecond=0) + timedelta(days=7)
    return check_in, check_in + timedelta(days=nights)


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"DEMO: {title}")
    print("=" * 70 + "\n")


def run_booking_demo():
    """
    Happy path.

    1. A two-night booking is created and priced from the hotel directory
    2. The payment simulator settles it and the webhook marks it paid
    3. The notification dispatcher sends the customer and owner notices
    """
    _banner("Booking created, paid and notified")
    pipeline = _build_pipeline()
    check_in, check_out = _stay(2)

    booking = pipeline["orchestrator"].create_booking(BookingRequest(
        user_id="user-001",
        hotel_id="hotel-001",
        room_id="room-101",
        check_in_date=check_in,
        check_out_date=check_out,
    ))
    print(f"Booking {booking.id}: total={booking.total_price:.2f} status={booking.status} "
          f"payment={booking.payment_status}")

    pipeline["simulator"].registry.wait(timeout=5)
    booking = pipeline["orchestrator"].get_booking(booking.id)
    print(f"After settlement: payment={booking.payment_status}")

    pipeline["event_log"].consume(Topics.BOOKING_CREATED, NOTIFICATION_GROUP, pipeline["dispatcher"].handle_record)

    print("\nNotifications sent:")
    for msg in pipeline["channels"].get_all_sent_messages():
        print(f"  {msg}")
    return pipeline["channels"].get_all_sent_messages()


def run_owner_lookup_failure_demo():
    """The hotel owner cannot be looked up: only the customer is notified."""
    _banner("Owner lookup fails during notification")
    settings = get_settings()
    directory = _OwnerLookupDownDirectory(StaticHotelDirectory.from_json(settings.data_dir).get_hotels())
    pipeline = _build_pipeline(hotel_directory=directory)
    check_in, check_out = _stay(3)

    pipeline["orchestrator"].create_booking(BookingRequest(
        user_id="user-002",
        hotel_id="hotel-002",
        room_id="room-201",
        check_in_date=check_in,
        check_out_date=check_out,
    ))
    pipeline["event_log"].consume(Topics.BOOKING_CREATED, NOTIFICATION_GROUP, pipeline["dispatcher"].handle_record)
    pipeline["simulator"].registry.wait(timeout=5)

    print("\nNotifications sent:")
    for msg in pipeline["channels"].get_all_sent_messages():
        print(f"  {msg}")
    print(f"Unhandled events left on the log: "
          f"{pipeline['event_log'].lag(Topics.BOOKING_CREATED, NOTIFICATION_GROUP)}")
    return pipeline["channels"].get_all_sent_messages()


def run_room_not_found_demo():
    """Pricing fails: the booking is rejected and nothing is written."""
    _banner("Room not found")
    pipeline = _build_pipeline()
    check_in, check_out = _stay(1)

    try:
        pipeline["orchestrator"].create_booking(BookingRequest(
            user_id="user-003",
            hotel_id="hotel-001",
            room_id="room-999",
            check_in_date=check_in,
            check_out_date=check_out,
        ))
    except BookingSystemError as e:
        print(f"Booking rejected: {e}")

    print(f"Store writes: {pipeline['store'].write_count}")
    print(f"Events published: {len(pipeline['event_log'].get_records(Topics.BOOKING_CREATED))}")
    return pipeline["store"].write_count


if __name__ == "__main__":
    configure_logging("INFO")
    run_booking_demo()
    run_owner_lookup_failure_demo()
    run_room_not_found_demo()

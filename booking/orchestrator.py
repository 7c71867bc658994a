"""
Booking orchestration.

Creating a booking is a fixed sequence of steps across services:

    validate -> price -> persist -> request payment -> publish event

The three side effects (persist, payment, publish) are not transactional
together. A failure in a later step is raised to the caller but does not undo
the earlier ones: a booking whose payment request failed stays in the store,
and so does a booking whose event could not be published. Retrying a failed
create prices and inserts again under a new id.

After creation the only thing that changes a booking is a payment webhook,
applied through update_payment_status.
"""

import logging
from typing import Optional
from uuid import uuid4

from booking.event_publisher import EventPublisher
from booking.payment_gateway import PaymentGateway
from booking.pricing import PricingResolver, count_nights
from booking.store import BookingStore
from events.booking_events import booking_created
from shared.errors import BookingNotFound, InvalidDateRange, InvalidStatus
from shared.metrics import PipelineMetrics, default_metrics
from shared.models import (
    Booking,
    BookingRequest,
    BookingStatus,
    PaymentStatus,
    PaymentWebhook,
    utc_now,
)


class BookingOrchestrator:
    """
    Creates bookings and applies payment outcomes to them.

    Example:
        orchestrator = BookingOrchestrator(
            store=InMemoryBookingStore(),
            pricing=PricingResolver(hotel_directory),
            publisher=EventPublisher(event_log, "booking-created"),
        )
        booking = orchestrator.create_booking(request)
    """

    def __init__(
        self,
        store: BookingStore,
        pricing: PricingResolver,
        publisher: EventPublisher,
        payment_gateway: Optional[PaymentGateway] = None,
        require_payment: bool = False,
        logger: Optional[logging.Logger] = None,
        metrics: Optional[PipelineMetrics] = None,
    ):
        """
        Args:
            store: Where bookings are persisted
            pricing: Resolves nightly rates
            publisher: Publishes booking-created events
            payment_gateway: Payment service client. Optional: without it,
                bookings are confirmed without a payment request
            require_payment: Refuse to run without a payment gateway
            logger: Logger to report on (defaults to "booking_orchestrator")
            metrics: Where the bookings-created count goes
        """
        if require_payment and payment_gateway is None:
            raise ValueError("require_payment is set but no payment gateway is configured")

        self.store = store
        self.pricing = pricing
        self.publisher = publisher
        self.payment_gateway = payment_gateway
        self.logger = logger or logging.getLogger("booking_orchestrator")
        self.metrics = metrics or default_metrics()

    # =========================================================================
    # Commands
    # =========================================================================

    def create_booking(self, request: BookingRequest) -> Booking:
        """
        Create a booking.

        Raises:
            InvalidDateRange: check-in is not before check-out
            RoomNotFound, ServiceUnavailable: pricing failed (nothing persisted)
            PaymentError: the payment request failed (booking stays persisted)
            PublishError: the event could not be published (booking stays persisted)
        """
        if request.check_in_date >= request.check_out_date:
            raise InvalidDateRange(request.check_in_date, request.check_out_date)

        rate = self.pricing.get_nightly_rate(request.hotel_id, request.room_id)
        nights = count_nights(request.check_in_date, request.check_out_date)

        now = utc_now()
        booking = Booking(
            id=str(uuid4()),
            user_id=request.user_id,
            hotel_id=request.hotel_id,
            room_id=request.room_id,
            check_in_date=request.check_in_date,
            check_out_date=request.check_out_date,
            total_price=rate * nights,
            status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        self.store.create(booking)
        self.metrics.record_booking_created()
        self.logger.info(
            f"Booking {booking.id} created: hotel={booking.hotel_id} room={booking.room_id} "
            f"nights={nights} total={booking.total_price:.2f}"
        )

        if self.payment_gateway is not None:
            try:
                response = self.payment_gateway.create_payment(booking.id, booking.total_price)
            except Exception as e:
                self.logger.error(f"Payment request failed for booking {booking.id}: {e}")
                raise
            self.logger.info(f"Payment {response.payment_id} requested for booking {booking.id}")

        try:
            self.publisher.publish(booking_created(booking))
        except Exception as e:
            self.logger.error(f"Failed to publish booking.created for {booking.id}: {e}")
            raise

        return booking

    def update_payment_status(self, booking_id: str, status: str) -> Booking:
        """
        Record a payment outcome on a booking.

        Raises:
            InvalidStatus: status is not pending/paid/failed/refunded
            BookingNotFound: no such booking
        """
        payment_status = PaymentStatus.parse(status)
        if payment_status is None:
            raise InvalidStatus(status)

        updated = self.store.update_payment_status(booking_id, payment_status.value)
        if updated is None:
            raise BookingNotFound(booking_id)

        self.logger.info(f"Booking {booking_id} payment status -> {payment_status.value}")
        return updated

    def apply_payment_webhook(self, webhook: PaymentWebhook) -> Booking:
        """Apply a settlement webhook from the payment service."""
        self.logger.info(
            f"Payment webhook: payment={webhook.payment_id} booking={webhook.booking_id} "
            f"status={webhook.status}"
        )
        return self.update_payment_status(webhook.booking_id, webhook.status)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.store.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    def get_bookings_by_user(self, user_id: str) -> list[Booking]:
        return self.store.list_by_user(user_id)

    def get_bookings_by_hotel(self, hotel_id: str) -> list[Booking]:
        return self.store.list_by_hotel(hotel_id)

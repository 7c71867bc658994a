"""
Booking service core.

- BookingOrchestrator: create bookings, apply payment outcomes
- PricingResolver: nightly rates from the hotel directory
- PaymentGateway: payment initiation (HTTP or in-process)
- EventPublisher: booking-created events onto the event log
- BookingStore / HotelDirectory: collaborator contracts
"""

from booking.event_publisher import EventPublisher
from booking.hotel_directory import HotelDirectory, HttpHotelDirectory, StaticHotelDirectory
from booking.orchestrator import BookingOrchestrator
from booking.payment_gateway import HttpPaymentGateway, LocalPaymentGateway, PaymentGateway
from booking.pricing import PricingResolver, calculate_total_price, count_nights
from booking.store import BookingStore, InMemoryBookingStore

__all__ = [
    "BookingOrchestrator",
    "BookingStore",
    "EventPublisher",
    "HotelDirectory",
    "HttpHotelDirectory",
    "HttpPaymentGateway",
    "InMemoryBookingStore",
    "LocalPaymentGateway",
    "PaymentGateway",
    "PricingResolver",
    "StaticHotelDirectory",
    "calculate_total_price",
    "count_nights",
]

"""
Domain models for the hotel booking pipeline.

These are the shapes that cross service boundaries: the booking record, the
booking-created event, the payment request/response/webhook trio, and the
small slice of hotel data the booking service needs.

Design decisions:
- Using Pydantic for validation and serialization
- Prices are floats, timestamps are datetimes serialized as ISO-8601
- Client-supplied fields the server derives (total price, status) are not
  part of BookingRequest and are ignored if sent
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Enums - Status values used across the domain
# =============================================================================

class BookingStatus(str, Enum):
    """
    Booking lifecycle states.
    Only CONFIRMED is ever assigned; there is no cancellation flow.
    """
    CONFIRMED = "confirmed"


class PaymentStatus(str, Enum):
    """Payment state as tracked on the booking record."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, value: str) -> Optional["PaymentStatus"]:
        """Case-insensitive lookup. Returns None for unknown values."""
        normalized = value.strip().lower() if isinstance(value, str) else ""
        for status in cls:
            if status.value == normalized:
                return status
        return None


class SettlementStatus(str, Enum):
    """States of a payment inside the payment service."""
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"


class NotificationChannelType(str, Enum):
    """Channels the delivery service knows how to route to."""
    EMAIL = "email"
    SMS = "sms"
    TELEGRAM = "telegram"


# =============================================================================
# Booking
# =============================================================================

class BookingRequest(BaseModel):
    """
    Payload a client sends to create a booking.

    Anything else in the body (total_price, status, id) is dropped:
    those fields belong to the server.
    """
    user_id: str = Field(..., min_length=1, description="Who is booking")
    hotel_id: str = Field(..., min_length=1, description="Hotel being booked")
    room_id: str = Field(..., min_length=1, description="Room within the hotel")
    check_in_date: datetime = Field(..., description="Start of the stay")
    check_out_date: datetime = Field(..., description="End of the stay")

    model_config = ConfigDict(extra="ignore")

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """Timestamps without an offset are taken as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Booking(BaseModel):
    """
    A reservation linking a user, hotel and room for a date range.

    Created once by the orchestrator. After that only payment_status
    (and updated_at) ever change, driven by payment webhooks.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    hotel_id: str
    room_id: str
    check_in_date: datetime
    check_out_date: datetime
    total_price: float = Field(..., ge=0, description="Nightly rate x nights")
    status: BookingStatus = Field(default=BookingStatus.CONFIRMED)
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(use_enum_values=True)


class BookingEvent(BaseModel):
    """
    Immutable snapshot of a booking at creation time.

    Carries everything the notification pipeline needs so consumers
    never have to call back into the booking service.
    """
    booking_id: str
    user_id: str
    hotel_id: str
    room_id: str
    check_in_date: datetime
    check_out_date: datetime
    total_price: float
    event_type: str
    timestamp: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_booking(cls, booking: Booking, event_type: str) -> "BookingEvent":
        return cls(
            booking_id=booking.id,
            user_id=booking.user_id,
            hotel_id=booking.hotel_id,
            room_id=booking.room_id,
            check_in_date=booking.check_in_date,
            check_out_date=booking.check_out_date,
            total_price=booking.total_price,
            event_type=event_type,
        )


# =============================================================================
# Payment
# =============================================================================

class PaymentRequest(BaseModel):
    """Ask the payment service to charge for a booking."""
    booking_id: str
    amount: float
    currency: str = Field(default="RUB")


class PaymentResponse(BaseModel):
    """
    Immediate answer from the payment service.

    Only says the payment was accepted for processing; the real outcome
    arrives later as a PaymentWebhook.
    """
    payment_id: str
    status: SettlementStatus = Field(default=SettlementStatus.PROCESSING)
    message: Optional[str] = Field(default=None)

    model_config = ConfigDict(use_enum_values=True)


class PaymentWebhook(BaseModel):
    """Settlement outcome POSTed back to the booking service."""
    payment_id: str
    booking_id: str
    status: str = Field(..., description="Final status, paid or failed")
    amount: float = Field(default=0.0)
    processed_at: Optional[str] = Field(default=None, description="ISO-8601 timestamp")


# =============================================================================
# Hotel directory
# =============================================================================

class Room(BaseModel):
    """A bookable room and its current nightly price."""
    id: str
    price_per_night: float = Field(..., ge=0)


class Hotel(BaseModel):
    """The fields of a hotel that the booking pipeline cares about."""
    id: str
    name: str = Field(default="")
    owner_id: str
    rooms: list[Room] = Field(default_factory=list)

    def find_room(self, room_id: str) -> Optional[Room]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None


# =============================================================================
# Notifications
# =============================================================================

class NotificationRequest(BaseModel):
    """Wire shape of a send request to the delivery service."""
    channel: NotificationChannelType = Field(default=NotificationChannelType.EMAIL)
    recipient: str = Field(..., min_length=1)
    subject: Optional[str] = Field(default=None)
    message: str

    model_config = ConfigDict(use_enum_values=True)

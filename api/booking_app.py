"""
FastAPI application for the booking service.

Endpoints:
- POST /api/bookings                  create a booking (201)
- GET  /api/bookings/{id}             one booking
- GET  /api/bookings/user/{user_id}   a user's bookings, newest first
- GET  /api/bookings/hotel/{hotel_id} a hotel's bookings, newest first
- POST /api/webhooks/payment          settlement outcome from the payment service
- GET  /health
- GET  /metrics                        Prometheus exposition

Run with:
    uvicorn api.booking_app:app --port 8082
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException

from api.instrumentation import install_metrics
from booking.event_publisher import EventPublisher
from booking.hotel_directory import HttpHotelDirectory, StaticHotelDirectory
from booking.orchestrator import BookingOrchestrator
from booking.payment_gateway import HttpPaymentGateway
from booking.pricing import PricingResolver
from booking.store import InMemoryBookingStore
from events.event_log import EventLog
from shared.config import Settings, configure_logging, get_settings
from shared.errors import (
    BookingNotFound,
    BookingSystemError,
    HotelNotFound,
    RoomNotFound,
    ServiceUnavailable,
    ValidationError,
)
from shared.metrics import PipelineMetrics, default_metrics
from shared.models import Booking, BookingRequest, PaymentWebhook

logger = logging.getLogger("booking_api")


def build_orchestrator(
    settings: Settings,
    event_log: Optional[EventLog] = None,
    metrics: Optional[PipelineMetrics] = None,
) -> BookingOrchestrator:
    """Wire a BookingOrchestrator from settings."""
    metrics = metrics or default_metrics()
    if settings.hotel_service_url:
        hotel_directory = HttpHotelDirectory(
            settings.hotel_service_url, timeout=settings.http_timeout_seconds
        )
    else:
        hotel_directory = StaticHotelDirectory.from_json(settings.data_dir)

    payment_gateway = None
    if settings.payment_service_url:
        payment_gateway = HttpPaymentGateway(
            settings.payment_service_url,
            currency=settings.currency,
            timeout=settings.http_timeout_seconds,
        )

    event_log = event_log or EventLog(
        partitions=settings.event_log_partitions,
        path=settings.event_log_path,
        metrics=metrics,
    )

    return BookingOrchestrator(
        store=InMemoryBookingStore(),
        pricing=PricingResolver(hotel_directory),
        publisher=EventPublisher(event_log, settings.booking_topic),
        payment_gateway=payment_gateway,
        require_payment=settings.require_payment,
        metrics=metrics,
    )


# Module-level instances, replaced in tests through reset_api_state
_orchestrator: Optional[BookingOrchestrator] = None
_metrics: Optional[PipelineMetrics] = None


def get_metrics() -> PipelineMetrics:
    return _metrics or default_metrics()


def get_orchestrator() -> BookingOrchestrator:
    """Get the orchestrator, building it from settings on first use."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = build_orchestrator(get_settings(), metrics=get_metrics())
    return _orchestrator


def reset_api_state(
    orchestrator: Optional[BookingOrchestrator] = None,
    metrics: Optional[PipelineMetrics] = None,
) -> None:
    """Reset API state (for testing)."""
    global _orchestrator, _metrics
    _orchestrator = orchestrator
    _metrics = metrics


def to_http_error(error: BookingSystemError) -> HTTPException:
    """Map a pipeline error to an HTTP status."""
    if isinstance(error, ValidationError):
        return HTTPException(status_code=400, detail=str(error))
    if isinstance(error, (BookingNotFound, RoomNotFound, HotelNotFound)):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ServiceUnavailable):
        return HTTPException(status_code=503, detail=str(error))
    return HTTPException(status_code=502, detail=str(error))


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    logger.info("Starting booking service")
    yield
    logger.info("Shutting down booking service")


app = FastAPI(
    title="Booking Service",
    description="Creates hotel bookings and tracks their payment status",
    version="1.0.0",
    lifespan=lifespan,
)
install_metrics(app, get_metrics)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "booking-service"}


@app.post("/api/bookings", response_model=Booking, status_code=201, tags=["Bookings"])
def create_booking(
    request: BookingRequest,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
) -> Booking:
    """
    Create a booking.

    The total price is computed here from the room's nightly rate; a
    total_price in the request body is ignored.
    """
    try:
        return orchestrator.create_booking(request)
    except BookingSystemError as e:
        logger.error(f"Failed to create booking: {e}")
        raise to_http_error(e) from e


@app.get("/api/bookings/user/{user_id}", response_model=list[Booking], tags=["Bookings"])
def get_bookings_by_user(
    user_id: str,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
) -> list[Booking]:
    return orchestrator.get_bookings_by_user(user_id)


@app.get("/api/bookings/hotel/{hotel_id}", response_model=list[Booking], tags=["Bookings"])
def get_bookings_by_hotel(
    hotel_id: str,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
) -> list[Booking]:
    return orchestrator.get_bookings_by_hotel(hotel_id)


@app.get("/api/bookings/{booking_id}", response_model=Booking, tags=["Bookings"])
def get_booking(
    booking_id: str,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
) -> Booking:
    try:
        return orchestrator.get_booking(booking_id)
    except BookingNotFound as e:
        raise to_http_error(e) from e


@app.post("/api/webhooks/payment", tags=["Webhooks"])
def payment_webhook(
    webhook: PaymentWebhook,
    orchestrator: BookingOrchestrator = Depends(get_orchestrator),
):
    """Apply a payment settlement outcome to its booking."""
    try:
        orchestrator.apply_payment_webhook(webhook)
    except BookingSystemError as e:
        logger.error(f"Failed to update payment status: {e}")
        raise to_http_error(e) from e
    return {"status": "ok"}

"""
FastAPI application for the payment service simulator.

Endpoints:
- POST /api/payments   accept a payment (202); the outcome follows as a webhook
- GET  /health
- GET  /metrics        Prometheus exposition

Run with:
    uvicorn api.payment_app:app --port 8083
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI

from api.instrumentation import install_metrics
from payment.simulator import PaymentSimulator
from payment.webhook import HttpWebhookSender
from shared.config import configure_logging, get_settings
from shared.metrics import PipelineMetrics, default_metrics
from shared.models import PaymentRequest, PaymentResponse

logger = logging.getLogger("payment_api")

# Seconds to wait for in-flight settlements on shutdown
SHUTDOWN_GRACE_SECONDS = 5.0

_simulator: Optional[PaymentSimulator] = None
_metrics: Optional[PipelineMetrics] = None


def get_metrics() -> PipelineMetrics:
    return _metrics or default_metrics()


def get_simulator() -> PaymentSimulator:
    """Get the payment simulator, building it from settings on first use."""
    global _simulator
    if _simulator is None:
        settings = get_settings()
        _simulator = PaymentSimulator(
            webhook_sender=HttpWebhookSender(
                settings.booking_webhook_url, timeout=settings.http_timeout_seconds
            ),
            settlement_delay=settings.settlement_delay_seconds,
        )
    return _simulator


def reset_api_state(
    simulator: Optional[PaymentSimulator] = None,
    metrics: Optional[PipelineMetrics] = None,
) -> None:
    """Reset API state (for testing)."""
    global _simulator, _metrics
    _simulator = simulator
    _metrics = metrics


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    logger.info("Starting payment service")
    yield
    if _simulator is not None:
        pending = _simulator.registry.in_flight()
        if pending and not _simulator.registry.wait(SHUTDOWN_GRACE_SECONDS):
            logger.warning(f"Shutting down with {_simulator.registry.in_flight()} unsettled payments")
    logger.info("Shutting down payment service")


app = FastAPI(
    title="Payment Service",
    description="Accepts payments and reports their outcome through a webhook",
    version="1.0.0",
    lifespan=lifespan,
)
install_metrics(app, get_metrics)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "payment-service"}


@app.post("/api/payments", response_model=PaymentResponse, status_code=202, tags=["Payments"])
def create_payment(
    request: PaymentRequest,
    simulator: PaymentSimulator = Depends(get_simulator),
) -> PaymentResponse:
    """Accept a payment for processing. Currency defaults to RUB."""
    if not request.currency:
        request.currency = get_settings().currency
    return simulator.process_payment(request)

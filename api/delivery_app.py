"""
FastAPI application for the delivery service.

Routes a send request to the matching mock channel.

Endpoints:
- POST /api/notifications/send
- GET  /health
- GET  /metrics   Prometheus exposition

Run with:
    uvicorn api.delivery_app:app --port 8084
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from api.instrumentation import install_metrics
from shared.channels import NotificationChannels
from shared.config import configure_logging, get_settings
from shared.metrics import PipelineMetrics, default_metrics
from shared.models import NotificationRequest

logger = logging.getLogger("delivery_api")


class SendNotificationResponse(BaseModel):
    success: bool
    message: Optional[str] = None


_channels: Optional[NotificationChannels] = None
_metrics: Optional[PipelineMetrics] = None


def get_metrics() -> PipelineMetrics:
    return _metrics or default_metrics()


def get_channels() -> NotificationChannels:
    """Get the notification channels, configured from settings on first use."""
    global _channels
    if _channels is None:
        _channels = NotificationChannels(telegram_bot_token=get_settings().telegram_bot_token)
    return _channels


def reset_api_state(
    channels: Optional[NotificationChannels] = None,
    metrics: Optional[PipelineMetrics] = None,
) -> None:
    """Reset API state (for testing)."""
    global _channels, _metrics
    _channels = channels
    _metrics = metrics


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    logger.info("Starting delivery service")
    yield
    logger.info("Shutting down delivery service")


app = FastAPI(
    title="Delivery Service",
    description="Sends notifications over email, SMS and Telegram",
    version="1.0.0",
    lifespan=lifespan,
)
install_metrics(app, get_metrics)


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "delivery-service"}


@app.post("/api/notifications/send", response_model=SendNotificationResponse, tags=["Notifications"])
def send_notification(
    request: NotificationRequest,
    channels: NotificationChannels = Depends(get_channels),
) -> SendNotificationResponse:
    result = channels.send(request.channel, request.recipient, request.subject, request.message)
    if not result.success:
        logger.error(f"Failed to send {request.channel} notification to {request.recipient}: {result.error}")
        raise HTTPException(status_code=502, detail=result.error)
    return SendNotificationResponse(success=True, message="notification sent")

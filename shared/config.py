"""
Runtime configuration for the booking pipeline services.

Every service reads the same Settings object; each one only looks at the
fields it needs. Values come from the environment or a local .env file.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


class Settings(BaseSettings):
    """Settings loaded from environment variables (and .env)."""

    log_level: str = "INFO"

    # Collaborator endpoints
    hotel_service_url: str = "http://hotel-service:8081"
    payment_service_url: str = Field(
        default="",
        description="Empty disables payment initiation from the booking service",
    )
    delivery_service_url: str = "http://delivery-service:8084"
    booking_webhook_url: str = "http://booking-service:8082/api/webhooks/payment"
    http_timeout_seconds: float = 10.0

    # Event log
    booking_topic: str = "booking-created"
    notification_group: str = "notification-service"
    event_log_path: Optional[Path] = None
    event_log_partitions: int = Field(default=3, ge=1)

    # Payment
    settlement_delay_seconds: float = Field(default=2.0, ge=0)
    currency: str = "RUB"
    require_payment: bool = False

    # Notifications
    notification_channel: str = "email"
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Without it the delivery service fails every Telegram send",
    )

    # Port the standalone notification consumer serves /metrics on; 0 disables it
    consumer_metrics_port: int = Field(default=0, ge=0)

    # Local hotel fixtures, used when no hotel service is configured
    data_dir: Path = Path(__file__).parent.parent / "data"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Apply the shared log format to the root logger."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )

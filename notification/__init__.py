"""
Notification service.

- NotificationDispatcher: booking-created events -> customer and owner notices
- DeliveryClient: HTTP channel to the delivery service
"""

from notification.delivery import DeliveryClient
from notification.dispatcher import DispatchReport, NotificationChannel, NotificationDispatcher

__all__ = [
    "DeliveryClient",
    "DispatchReport",
    "NotificationChannel",
    "NotificationDispatcher",
]

"""
Background notification delivery.
"""

from .notification_queue import NotificationQueue, get_notification_queue

__all__ = [
    "NotificationQueue",
    "get_notification_queue",
]

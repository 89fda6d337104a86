"""Notification routing between native observers and query instances."""
from spotlight.events.registry import InstanceRegistry
from spotlight.events.router import NotificationHandler, NotificationRouter, get_router
from spotlight.events.types import NotificationEvent

__all__ = [
    "InstanceRegistry",
    "NotificationEvent",
    "NotificationHandler",
    "NotificationRouter",
    "get_router",
]

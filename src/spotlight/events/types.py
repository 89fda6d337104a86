"""Notification event types routed from the native substrate."""
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from spotlight.native.types import NotificationKind


class NotificationEvent(BaseModel):
    """Notification delivered to a query instance.

    Attributes:
        kind: Which query notification was posted.
        token: Registry token of the observer that received it.
        notification: Raw native notification object, passed through untouched.
        received_at: Time the router received the notification (UTC).
    """

    kind: NotificationKind = Field(description="Notification kind")
    token: int = Field(description="Observer registry token")
    notification: Any = Field(default=None, description="Raw native notification")
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

"""Routes native query notifications to the query instance that owns them."""
from typing import Any, Protocol

import structlog

from spotlight.events.registry import InstanceRegistry
from spotlight.events.types import NotificationEvent
from spotlight.native.types import NotificationKind

logger = structlog.get_logger()


class NotificationHandler(Protocol):
    """Receiver for the two query notifications."""

    def query_did_update(self, event: NotificationEvent) -> None: ...

    def query_did_finish_gathering(self, event: NotificationEvent) -> None: ...


class NotificationRouter:
    """Dispatches notifications by observer token.

    Native observers call dispatch() with their token. The router looks the
    token up in its registry and invokes the matching handler method.
    Notifications for unknown tokens are dropped, since the substrate may
    deliver late notifications for queries that were already closed.
    """

    def __init__(self, registry: InstanceRegistry[NotificationHandler] | None = None) -> None:
        """Initialize router.

        Args:
            registry: Registry to resolve tokens with. Creates one if None.
        """
        self._registry: InstanceRegistry[NotificationHandler] = (
            registry if registry is not None else InstanceRegistry()
        )
        self._dropped_count = 0

    @property
    def registry(self) -> InstanceRegistry[NotificationHandler]:
        """Registry backing this router."""
        return self._registry

    @property
    def dropped_notifications(self) -> int:
        """Number of notifications that matched no registered handler."""
        return self._dropped_count

    def register(self, handler: NotificationHandler) -> int:
        """Register a handler and return its token."""
        return self._registry.register(handler)

    def unregister(self, token: int) -> bool:
        """Remove the handler registered under token."""
        return self._registry.unregister(token)

    def dispatch(self, token: int, kind: NotificationKind, notification: Any = None) -> bool:
        """Deliver a native notification to its handler.

        Args:
            token: Token of the observer that received the notification.
            kind: Notification kind.
            notification: Raw native notification object.

        Returns:
            True if a handler received the event, False if it was dropped.
        """
        handler = self._registry.lookup(token)
        if handler is None:
            self._dropped_count += 1
            logger.debug("notification_dropped", token=token, kind=kind.value)
            return False

        event = NotificationEvent(kind=kind, token=token, notification=notification)
        if kind is NotificationKind.UPDATE:
            handler.query_did_update(event)
        elif kind is NotificationKind.FINISHED_GATHERING:
            handler.query_did_finish_gathering(event)
        return True


_default_router: NotificationRouter | None = None


def get_router() -> NotificationRouter:
    """Return the process-wide router, creating it on first use."""
    global _default_router
    if _default_router is None:
        _default_router = NotificationRouter()
    return _default_router

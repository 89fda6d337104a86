"""Protocols describing the native metadata-query substrate."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from spotlight.events.router import NotificationRouter

DISPLAY_NAME_ATTRIBUTE = "kMDItemDisplayName"


class NotificationKind(str, Enum):
    """Asynchronous notifications posted by a native query."""

    UPDATE = "update"
    FINISHED_GATHERING = "finished_gathering"


class RunLoopStatus(str, Enum):
    """Outcome of servicing the native run loop once."""

    HANDLED_SOURCE = "handled_source"
    TIMED_OUT = "timed_out"
    FINISHED = "finished"
    STOPPED = "stopped"


class NativeQuery(Protocol):
    """A live metadata query owned by the native substrate.

    Attributes:
        handle: Native object used as the notification source.
    """

    handle: Any

    def set_predicate(self, query: str) -> None: ...

    def start(self) -> bool: ...

    def stop(self) -> None: ...

    def result_count(self) -> int: ...

    def value_at(self, index: int, attribute: str) -> Any: ...


class NativeObserver(Protocol):
    """Native object that receives notifications for one query."""

    token: int


class NotificationCenter(Protocol):
    """Subscription mechanism for native query notifications."""

    def add_observer(
        self,
        observer: NativeObserver,
        kind: NotificationKind,
        query: NativeQuery,
    ) -> None: ...

    def remove_observer(self, observer: NativeObserver, query: NativeQuery) -> None: ...


class RunLoop(Protocol):
    """Event pump that delivers pending native notifications."""

    def run_once(self, timeout: float) -> RunLoopStatus: ...


class Substrate(Protocol):
    """Factory and services of one native search backend."""

    notification_center: NotificationCenter
    run_loop: RunLoop

    def create_query(self) -> NativeQuery: ...

    def create_observer(
        self, token: int, router: NotificationRouter
    ) -> NativeObserver: ...

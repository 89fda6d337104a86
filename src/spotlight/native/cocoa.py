"""PyObjC bindings for NSMetadataQuery and the Core Foundation run loop.

Importing this module requires macOS with pyobjc-framework-Cocoa installed.
Use spotlight.native.get_substrate() rather than importing it directly.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import objc
import structlog
from CoreFoundation import (
    CFRunLoopRunInMode,
    kCFRunLoopDefaultMode,
    kCFRunLoopRunFinished,
    kCFRunLoopRunHandledSource,
    kCFRunLoopRunStopped,
)
from Foundation import (
    NSMetadataQuery,
    NSMetadataQueryDidFinishGatheringNotification,
    NSMetadataQueryDidUpdateNotification,
    NSNotificationCenter,
    NSObject,
    NSPredicate,
)

from spotlight.native.types import NotificationKind, RunLoopStatus

if TYPE_CHECKING:
    from spotlight.events.router import NotificationRouter

logger = structlog.get_logger()

_SELECTORS: dict[NotificationKind, bytes] = {
    NotificationKind.UPDATE: b"queryDidUpdate:",
    NotificationKind.FINISHED_GATHERING: b"queryDidFinishGathering:",
}

_NOTIFICATION_NAMES: dict[NotificationKind, str] = {
    NotificationKind.UPDATE: NSMetadataQueryDidUpdateNotification,
    NotificationKind.FINISHED_GATHERING: NSMetadataQueryDidFinishGatheringNotification,
}

_RUN_LOOP_STATUS: dict[int, RunLoopStatus] = {
    kCFRunLoopRunHandledSource: RunLoopStatus.HANDLED_SOURCE,
    kCFRunLoopRunFinished: RunLoopStatus.FINISHED,
    kCFRunLoopRunStopped: RunLoopStatus.STOPPED,
}


class SpotlightNotificationObserver(NSObject):
    """Objective-C observer forwarding query notifications to a router.

    The class is registered with the Objective-C runtime once, when this
    module is first imported. Each query gets its own instance so the
    router can map the notification back by token.
    """

    @objc.python_method
    def bind(self, token: int, router: NotificationRouter) -> None:
        self.token = token
        self.router = router

    @objc.typedSelector(b"v@:@")
    def queryDidUpdate_(self, notification: Any) -> None:
        self.router.dispatch(self.token, NotificationKind.UPDATE, notification)

    @objc.typedSelector(b"v@:@")
    def queryDidFinishGathering_(self, notification: Any) -> None:
        self.router.dispatch(
            self.token, NotificationKind.FINISHED_GATHERING, notification
        )


class CocoaMetadataQuery:
    """NativeQuery backed by an NSMetadataQuery instance."""

    def __init__(self) -> None:
        self.handle = NSMetadataQuery.alloc().init()

    def set_predicate(self, query: str) -> None:
        """Compile query with NSPredicate and assign it.

        The string is used verbatim as a predicate format. Malformed
        expressions raise from PyObjC unchanged.

        Args:
            query: Predicate expression, e.g. "kMDItemFSName == 'x.txt'".
        """
        predicate = NSPredicate.predicateWithFormat_(query)
        self.handle.setPredicate_(predicate)

    def start(self) -> bool:
        return bool(self.handle.startQuery())

    def stop(self) -> None:
        self.handle.stopQuery()

    def result_count(self) -> int:
        return int(self.handle.resultCount())

    def value_at(self, index: int, attribute: str) -> Any:
        item = self.handle.resultAtIndex_(index)
        return item.valueForAttribute_(attribute)


class CocoaNotificationCenter:
    """NotificationCenter backed by NSNotificationCenter.defaultCenter()."""

    def __init__(self) -> None:
        self._center = NSNotificationCenter.defaultCenter()

    def add_observer(
        self,
        observer: SpotlightNotificationObserver,
        kind: NotificationKind,
        query: CocoaMetadataQuery,
    ) -> None:
        self._center.addObserver_selector_name_object_(
            observer,
            _SELECTORS[kind],
            _NOTIFICATION_NAMES[kind],
            query.handle,
        )

    def remove_observer(
        self,
        observer: SpotlightNotificationObserver,
        query: CocoaMetadataQuery,
    ) -> None:
        self._center.removeObserver_name_object_(observer, None, query.handle)


class CocoaRunLoop:
    """Services the current thread's CFRunLoop in the default mode."""

    def run_once(self, timeout: float) -> RunLoopStatus:
        """Run the loop until one source is handled or timeout elapses.

        Args:
            timeout: Seconds to wait for a source; 0 returns immediately.

        Returns:
            Mapped CFRunLoopRunInMode result.
        """
        with objc.autorelease_pool():
            status = CFRunLoopRunInMode(kCFRunLoopDefaultMode, timeout, True)
        return _RUN_LOOP_STATUS.get(status, RunLoopStatus.TIMED_OUT)


class CocoaSubstrate:
    """Substrate wiring the Cocoa query, notification and run loop pieces."""

    def __init__(self) -> None:
        self.notification_center = CocoaNotificationCenter()
        self.run_loop = CocoaRunLoop()

    def create_query(self) -> CocoaMetadataQuery:
        return CocoaMetadataQuery()

    def create_observer(
        self, token: int, router: NotificationRouter
    ) -> SpotlightNotificationObserver:
        observer = SpotlightNotificationObserver.alloc().init()
        observer.bind(token, router)
        logger.debug("native_observer_created", token=token)
        return observer

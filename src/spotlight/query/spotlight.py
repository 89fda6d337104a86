"""Lifecycle of a single asynchronous Spotlight search."""
from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from types import TracebackType

import structlog
from pydantic import BaseModel, ConfigDict

from spotlight.errors import QueryClosedError
from spotlight.events.router import NotificationRouter, get_router
from spotlight.events.types import NotificationEvent
from spotlight.native import get_substrate
from spotlight.native.types import (
    DISPLAY_NAME_ATTRIBUTE,
    NativeObserver,
    NotificationKind,
    Substrate,
)
from spotlight.query.extractor import ResultCallback, ResultExtractor
from spotlight.query.poller import DEFAULT_POLL_INTERVAL, PollLoopDriver

logger = structlog.get_logger()


class QueryState(str, Enum):
    """Lifecycle states of a Spotlight query."""

    IDLE = "idle"
    PREDICATED = "predicated"
    RUNNING = "running"
    GATHERED = "gathered"
    CLOSED = "closed"


class SearchOutcome(BaseModel):
    """Completion signal for one gathering cycle.

    Attributes:
        query: Predicate expression that was searched.
        result_count: Results reported by the native query.
        update_count: Update notifications received before completion.
        error: Exception that aborted extraction, if any.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    query: str | None
    result_count: int
    update_count: int
    error: BaseException | None = None


CompletionCallback = Callable[[SearchOutcome], None]


class Spotlight:
    """Runs a metadata query in the background and reports its results.

    Construction registers the instance with the notification router and
    subscribes its native observer to the update and finished-gathering
    notifications of its own native query. search() starts the poll loop
    and the query; when gathering finishes every result is passed to
    on_result in index order, the poll loop stops, and on_complete is
    called once.

    search() needs a running event loop for the poll loop.

    Example:
        >>> async def folders() -> list[str]:
        ...     names: list[str] = []
        ...     done = asyncio.Event()
        ...     query = Spotlight(names.append, on_complete=lambda _: done.set())
        ...     with query:
        ...         query.search("kMDItemContentType == 'public.folder'")
        ...         await done.wait()
        ...     return names
    """

    def __init__(
        self,
        on_result: ResultCallback | None = None,
        *,
        on_complete: CompletionCallback | None = None,
        substrate: Substrate | None = None,
        router: NotificationRouter | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        run_loop_timeout: float = 0.0,
        attribute: str = DISPLAY_NAME_ATTRIBUTE,
    ) -> None:
        """Initialize query and subscribe to its notifications.

        Args:
            on_result: Called once per result value after gathering.
            on_complete: Called once after each gathering cycle.
            substrate: Native substrate. Uses the Cocoa substrate if None.
            router: Notification router. Uses the process-wide one if None.
            poll_interval: Seconds between run-loop ticks.
            run_loop_timeout: Seconds each run-loop pass may block.
            attribute: Metadata attribute extracted from each result.
        """
        self.on_result = on_result
        self.on_complete = on_complete
        self._substrate = substrate if substrate is not None else get_substrate()
        self._router = router if router is not None else get_router()

        self._native = self._substrate.create_query()
        self._token = self._router.register(self)
        center = self._substrate.notification_center
        observer: NativeObserver | None = None
        try:
            observer = self._substrate.create_observer(self._token, self._router)
            center.add_observer(observer, NotificationKind.UPDATE, self._native)
            center.add_observer(observer, NotificationKind.FINISHED_GATHERING, self._native)
        except Exception:
            if observer is not None:
                center.remove_observer(observer, self._native)
            self._router.unregister(self._token)
            raise
        self._observer = observer

        self._poller = PollLoopDriver(
            self._substrate.run_loop,
            interval=poll_interval,
            timeout=run_loop_timeout,
        )
        self._extractor = ResultExtractor(attribute)
        self._query: str | None = None
        self._state = QueryState.IDLE
        self._update_count = 0

    def __enter__(self) -> Spotlight:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def token(self) -> int:
        """Router token of this query's native observer."""
        return self._token

    @property
    def query(self) -> str | None:
        """Predicate expression last assigned."""
        return self._query

    @property
    def state(self) -> QueryState:
        return self._state

    @property
    def polling(self) -> bool:
        """Whether the poll loop is active."""
        return self._poller.active

    @property
    def update_count(self) -> int:
        return self._update_count

    @property
    def poller(self) -> PollLoopDriver:
        return self._poller

    def start_event_loop(self) -> None:
        """Start ticking the native run loop. No-op if already ticking."""
        self._poller.start()

    def stop_event_loop(self) -> None:
        """Stop ticking the native run loop. No-op if not ticking."""
        self._poller.stop()

    def set_query(self, query: str) -> None:
        """Assign a predicate built from query to the native query.

        The expression is not validated here; the substrate raises for
        malformed predicates.

        Args:
            query: Predicate expression in the substrate's grammar.

        Raises:
            QueryClosedError: If the query was closed.
        """
        self._ensure_open()
        self._native.set_predicate(query)
        self._query = query
        self._state = QueryState.PREDICATED

    def start(self) -> None:
        """Ask the native query to begin gathering.

        Notifications may arrive on any poll tick after this call.

        Raises:
            QueryClosedError: If the query was closed.
        """
        self._ensure_open()
        self._update_count = 0
        self._native.start()
        self._state = QueryState.RUNNING
        logger.info("query_started", token=self._token, query=self._query)

    def stop(self) -> None:
        """Ask the native query to stop gathering.

        Safe before start(). Notifications already queued may still be
        delivered after this call.
        """
        self._native.stop()
        if self._state is QueryState.RUNNING:
            self._state = QueryState.PREDICATED

    def search(self, query: str) -> None:
        """Start the poll loop, assign query and start gathering.

        Args:
            query: Predicate expression in the substrate's grammar.

        Raises:
            QueryClosedError: If the query was closed.
        """
        self._ensure_open()
        self.start_event_loop()
        self.set_query(query)
        self.start()

    def query_did_update(self, event: NotificationEvent) -> None:
        """Handle an in-progress update notification.

        Incremental results are not surfaced; updates are only counted.
        """
        self._update_count += 1
        logger.debug("query_did_update", token=self._token, updates=self._update_count)

    def query_did_finish_gathering(self, event: NotificationEvent) -> None:
        """Handle the finished-gathering notification.

        Stops the native query, extracts every result into on_result,
        stops the poll loop and signals on_complete. Extraction aborts at
        the first error; the poll loop is stopped regardless. The error is
        passed to on_complete, or re-raised when there is no on_complete.
        When re-raised from a poll tick it ends the tick task and is kept
        as poller.last_error.

        Args:
            event: Routed finished-gathering notification.
        """
        self.stop()
        self._state = QueryState.GATHERED

        count = 0
        error: Exception | None = None
        try:
            count = self._native.result_count()
            self._extractor.extract(self._native, self.on_result)
        except Exception as e:
            error = e
            if self.on_complete is not None:
                logger.exception("result_extraction_failed", token=self._token)
        finally:
            self.stop_event_loop()
            if self._state is QueryState.GATHERED:
                self._state = QueryState.IDLE

        logger.info(
            "query_finished_gathering",
            token=self._token,
            query=self._query,
            result_count=count,
            updates=self._update_count,
        )

        if self.on_complete is None:
            if error is not None:
                raise error
            return

        self.on_complete(
            SearchOutcome(
                query=self._query,
                result_count=count,
                update_count=self._update_count,
                error=error,
            )
        )

    def close(self) -> None:
        """Release the poll loop, observers and registry entry.

        Idempotent. Notifications still queued for this query are dropped
        by the router after close().
        """
        if self._state is QueryState.CLOSED:
            return
        self.stop_event_loop()
        self._native.stop()
        self._substrate.notification_center.remove_observer(self._observer, self._native)
        self._router.unregister(self._token)
        self._state = QueryState.CLOSED
        logger.debug("query_closed", token=self._token)

    def _ensure_open(self) -> None:
        if self._state is QueryState.CLOSED:
            raise QueryClosedError(self._token)

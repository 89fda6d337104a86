"""Awaitable wrappers around the callback-driven Spotlight query."""
import asyncio
from collections.abc import AsyncIterator
from typing import Any

import structlog

from spotlight.config import Settings
from spotlight.errors import SearchTimeoutError
from spotlight.events.router import NotificationRouter
from spotlight.native.types import Substrate
from spotlight.query.spotlight import SearchOutcome, Spotlight

logger = structlog.get_logger()


async def stream_search(
    query: str,
    *,
    substrate: Substrate | None = None,
    router: NotificationRouter | None = None,
    settings: Settings | None = None,
    timeout: float | None = None,
) -> AsyncIterator[Any]:
    """Run one search and yield its result values in index order.

    The query is closed when the generator finishes, fails or is
    abandoned by the consumer.

    Args:
        query: Predicate expression in the substrate's grammar.
        substrate: Native substrate. Uses the Cocoa substrate if None.
        router: Notification router. Uses the process-wide one if None.
        settings: Poll and extraction settings. Uses defaults if None.
        timeout: Seconds to wait for gathering to finish. No deadline if None.

    Yields:
        Extracted attribute value of each result.

    Raises:
        SearchTimeoutError: If gathering does not finish before the deadline.
    """
    if settings is None:
        settings = Settings()

    loop = asyncio.get_running_loop()
    results: asyncio.Queue[Any] = asyncio.Queue()
    done: asyncio.Future[SearchOutcome] = loop.create_future()

    def on_complete(outcome: SearchOutcome) -> None:
        if not done.done():
            done.set_result(outcome)

    spotlight = Spotlight(
        results.put_nowait,
        on_complete=on_complete,
        substrate=substrate,
        router=router,
        poll_interval=settings.poll_interval,
        run_loop_timeout=settings.run_loop_timeout,
        attribute=settings.result_attribute,
    )
    deadline = None if timeout is None else loop.time() + timeout

    try:
        spotlight.search(query)
        remaining = None if deadline is None else max(deadline - loop.time(), 0.0)
        try:
            outcome = await asyncio.wait_for(asyncio.shield(done), timeout=remaining)
        except TimeoutError:
            logger.warning("search_timeout", query=query, timeout=timeout)
            raise SearchTimeoutError(query, timeout or 0.0) from None

        while not results.empty():
            yield results.get_nowait()

        if outcome.error is not None:
            raise outcome.error
    finally:
        spotlight.close()


async def run_search(
    query: str,
    *,
    substrate: Substrate | None = None,
    router: NotificationRouter | None = None,
    settings: Settings | None = None,
    timeout: float | None = None,
) -> list[Any]:
    """Run one search and return all result values.

    Args:
        query: Predicate expression in the substrate's grammar.
        substrate: Native substrate. Uses the Cocoa substrate if None.
        router: Notification router. Uses the process-wide one if None.
        settings: Poll and extraction settings. Uses defaults if None.
        timeout: Seconds to wait for gathering to finish.

    Returns:
        Result values in native result order.
    """
    return [
        value
        async for value in stream_search(
            query,
            substrate=substrate,
            router=router,
            settings=settings,
            timeout=timeout,
        )
    ]

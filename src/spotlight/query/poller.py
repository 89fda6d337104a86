"""Periodic pump for the native run loop."""
import asyncio

import structlog

from spotlight.native.types import RunLoop, RunLoopStatus

logger = structlog.get_logger()

DEFAULT_POLL_INTERVAL = 0.05


class PollLoopDriver:
    """Keeps native notifications flowing by servicing the run loop on a timer.

    Each tick drains the run loop: it is serviced with a short timeout
    until a pass handles no source, then the driver sleeps until the next
    tick. Notification latency is bounded by one interval and nothing
    spins between ticks.

    Attributes:
        interval: Seconds between ticks.
        timeout: Seconds each run-loop pass may wait for a source.
    """

    def __init__(
        self,
        run_loop: RunLoop,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = 0.0,
    ) -> None:
        """Initialize poll loop driver.

        Args:
            run_loop: Native run loop to service.
            interval: Seconds between ticks.
            timeout: Seconds each run-loop pass may block.
        """
        self._run_loop = run_loop
        self.interval = interval
        self.timeout = timeout
        self._task: asyncio.Task[None] | None = None
        self._tick_count = 0
        self._last_error: BaseException | None = None

    @property
    def active(self) -> bool:
        """Whether the recurring tick is installed."""
        return self._task is not None

    @property
    def tick_count(self) -> int:
        """Number of ticks run since construction."""
        return self._tick_count

    @property
    def last_error(self) -> BaseException | None:
        """Exception that ended the most recent tick task, if any.

        A source that raises during a drain ends the tick task. The
        exception is retrieved when the task finishes, logged as
        poll_tick_failed and kept here until the next start().
        """
        return self._last_error

    def start(self) -> None:
        """Install the recurring tick on the running event loop.

        No-op if already active.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        if self._task is not None:
            return
        loop = asyncio.get_running_loop()
        self._last_error = None
        self._task = loop.create_task(self._run())
        self._task.add_done_callback(self._handle_task_done)
        logger.debug("poll_loop_started", interval=self.interval)

    def stop(self) -> None:
        """Cancel the recurring tick.

        Safe when not running, and from inside a tick: the current drain
        finishes and no further tick fires.
        """
        task = self._task
        if task is None:
            return
        self._task = None
        task.cancel()
        logger.debug("poll_loop_stopped", ticks=self._tick_count)

    def drain(self) -> int:
        """Service the run loop until a pass handles no source.

        Returns:
            Number of sources handled.
        """
        handled = 0
        while self._run_loop.run_once(self.timeout) is RunLoopStatus.HANDLED_SOURCE:
            handled += 1
        return handled

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            self._tick_count += 1
            self.drain()

    def _handle_task_done(self, task: asyncio.Task[None]) -> None:
        if self._task is task:
            self._task = None
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._last_error = error
            logger.error("poll_tick_failed", tick=self._tick_count, exc_info=error)

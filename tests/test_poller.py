"""Poll loop driver tests."""

import asyncio

import pytest

from fakes import FakeRunLoop, wait_until
from spotlight.native.types import RunLoopStatus
from spotlight.query.poller import PollLoopDriver


def test_drain_runs_until_nothing_handled() -> None:
    """Drain services the run loop until a pass handles no source."""
    run_loop = FakeRunLoop()
    seen: list[int] = []
    for i in range(3):
        run_loop.post(lambda i=i: seen.append(i))

    driver = PollLoopDriver(run_loop)

    assert driver.drain() == 3
    assert seen == [0, 1, 2]
    assert run_loop.passes == 4


def test_drain_stops_on_any_other_status() -> None:
    """Finished and stopped statuses end the drain like a timeout."""

    class FinishedLoop:
        calls = 0

        def run_once(self, timeout: float) -> RunLoopStatus:
            self.calls += 1
            return RunLoopStatus.FINISHED

    loop = FinishedLoop()
    assert PollLoopDriver(loop).drain() == 0
    assert loop.calls == 1


def test_stop_without_start_is_noop() -> None:
    """Stopping an inactive driver does nothing."""
    driver = PollLoopDriver(FakeRunLoop())
    driver.stop()
    assert driver.active is False


def test_start_requires_running_loop() -> None:
    """Start outside an event loop raises."""
    driver = PollLoopDriver(FakeRunLoop())
    with pytest.raises(RuntimeError):
        driver.start()


@pytest.mark.asyncio
async def test_start_twice_installs_one_timer() -> None:
    """A second start is a no-op; stop leaves no active timer."""
    driver = PollLoopDriver(FakeRunLoop(), interval=0.001)
    driver.start()
    task = driver._task
    driver.start()

    assert driver._task is task
    assert driver.active is True

    driver.stop()
    assert driver.active is False
    await asyncio.sleep(0.01)
    assert task is not None and task.cancelled()


@pytest.mark.asyncio
async def test_ticks_deliver_posted_sources() -> None:
    """Sources posted while running are handled on the next tick."""
    run_loop = FakeRunLoop()
    driver = PollLoopDriver(run_loop, interval=0.001)
    handled: list[str] = []

    driver.start()
    run_loop.post(lambda: handled.append("source"))
    await wait_until(lambda: handled == ["source"])
    driver.stop()


@pytest.mark.asyncio
async def test_stop_from_inside_tick_ends_loop() -> None:
    """Stopping during a drain lets it finish and prevents further ticks."""
    run_loop = FakeRunLoop()
    driver = PollLoopDriver(run_loop, interval=0.001)
    handled: list[str] = []

    def stop_source() -> None:
        handled.append("stop")
        driver.stop()

    run_loop.post(stop_source)
    run_loop.post(lambda: handled.append("after"))
    driver.start()

    await wait_until(lambda: not driver.active)
    ticks = driver.tick_count
    await asyncio.sleep(0.02)

    assert handled == ["stop", "after"]
    assert driver.tick_count == ticks


@pytest.mark.asyncio
async def test_failing_tick_ends_loop() -> None:
    """An exception from the run loop stops the driver and is kept as last_error."""

    class BrokenLoop:
        def run_once(self, timeout: float) -> RunLoopStatus:
            raise OSError("run loop unavailable")

    driver = PollLoopDriver(BrokenLoop(), interval=0.001)
    driver.start()
    task = driver._task
    await wait_until(lambda: not driver.active)

    assert task is not None and task.done()
    assert isinstance(driver.last_error, OSError)

    driver.start()
    assert driver.last_error is None
    driver.stop()

"""Run the Spotlight search API: ``python -m spotlight``."""

import asyncio
import contextlib
import signal
import sys

import structlog
import uvicorn

from spotlight.app import create_app
from spotlight.config import Settings
from spotlight.events.router import get_router
from spotlight.lifecycle import GracefulShutdown
from spotlight.logging import configure_logging

logger = structlog.get_logger()

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


def build_server(settings: Settings) -> uvicorn.Server:
    """Create the uvicorn server for the search API.

    uvicorn keeps the logging set up by configure_logging (log_config is
    None) and gets shutdown_timeout to finish open SSE streams.

    Args:
        settings: Server configuration.

    Returns:
        Server ready to serve().
    """
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level="debug" if settings.debug else "warning",
        access_log=False,
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )
    return uvicorn.Server(config)


async def serve(settings: Settings) -> None:
    """Serve until SIGTERM/SIGINT or until uvicorn exits on its own.

    Searches run on this event loop, which is also the loop every
    query's poll driver ticks on.
    """
    server = build_server(settings)
    shutdown = GracefulShutdown()

    loop = asyncio.get_running_loop()
    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, shutdown.trigger)

    async def stop_on_signal() -> None:
        await shutdown.wait_for_trigger()
        server.should_exit = True

    watcher = asyncio.create_task(stop_on_signal())
    logger.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        poll_interval_ms=settings.poll_interval_ms,
        auth=bool(settings.key),
    )
    try:
        await server.serve()
    finally:
        shutdown.trigger()
        await watcher
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)

    logger.info("server_stopped", active_queries=len(get_router().registry))


def main() -> None:
    settings = Settings()
    configure_logging(debug=settings.debug, json_output=settings.log_json)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(settings))

    sys.exit(0)


if __name__ == "__main__":
    main()

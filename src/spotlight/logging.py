"""Structured logging configuration using structlog."""

import logging
import sys

import structlog
from structlog.typing import Processor

# Loggers owned by uvicorn; their handlers are removed so records reach the root.
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _renderer(json_output: bool) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(debug: bool = False, json_output: bool = True) -> None:
    """Configure structlog and route stdlib logging through the same renderer.

    Query, router and poll loop events are emitted at debug level, so
    enable debug to trace a search end to end. Records from uvicorn and
    other stdlib loggers get the same timestamp, level and contextvars
    as structlog events.

    Args:
        debug: Enable debug-level logging when True.
        json_output: Render JSON lines when True, plain console lines otherwise.
    """
    level = logging.DEBUG if debug else logging.INFO
    renderer = _renderer(json_output)

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    # ConsoleRenderer formats exceptions itself.
    exc_info: list[Processor] = [structlog.processors.format_exc_info] if json_output else []

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            *exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *exc_info,
                renderer,
            ],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in UVICORN_LOGGERS:
        logging.getLogger(name).handlers = []
        logging.getLogger(name).propagate = True

"""Query lifecycle, run-loop polling and result extraction."""
from spotlight.query.extractor import ResultCallback, ResultExtractor
from spotlight.query.poller import DEFAULT_POLL_INTERVAL, PollLoopDriver
from spotlight.query.runner import run_search, stream_search
from spotlight.query.spotlight import (
    CompletionCallback,
    QueryState,
    SearchOutcome,
    Spotlight,
)

__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "CompletionCallback",
    "PollLoopDriver",
    "QueryState",
    "ResultCallback",
    "ResultExtractor",
    "SearchOutcome",
    "Spotlight",
    "run_search",
    "stream_search",
]

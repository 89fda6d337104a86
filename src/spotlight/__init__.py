"""Asynchronous Spotlight metadata queries driven by native notifications."""
from spotlight.errors import (
    QueryClosedError,
    SearchTimeoutError,
    SpotlightError,
    UnsupportedPlatformError,
)
from spotlight.query import (
    QueryState,
    SearchOutcome,
    Spotlight,
    run_search,
    stream_search,
)

__version__ = "0.1.0"

__all__ = [
    "QueryClosedError",
    "QueryState",
    "SearchOutcome",
    "SearchTimeoutError",
    "Spotlight",
    "SpotlightError",
    "UnsupportedPlatformError",
    "run_search",
    "stream_search",
]

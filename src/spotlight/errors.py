"""Exceptions raised by the spotlight package.

Failures coming from the native substrate itself (malformed predicates,
permission errors, attribute fetches) are not wrapped and propagate as
raised by PyObjC.
"""


class SpotlightError(Exception):
    """Base class for spotlight errors."""


class UnsupportedPlatformError(SpotlightError):
    """Raised when no native search substrate is available."""


class QueryClosedError(SpotlightError):
    """Raised when a closed query is asked to search."""

    def __init__(self, token: int) -> None:
        """Initialize closed query error.

        Args:
            token: Registry token of the closed query.
        """
        super().__init__(f"Query {token} is closed")
        self.token = token


class SearchTimeoutError(SpotlightError):
    """Raised when a search does not finish gathering before its deadline."""

    def __init__(self, query: str, timeout: float) -> None:
        """Initialize search timeout error.

        Args:
            query: Predicate expression that was running.
            timeout: Deadline in seconds that elapsed.
        """
        super().__init__(f"Search did not finish within {timeout}s: {query}")
        self.query = query
        self.timeout = timeout

"""Reads gathered results out of a finished native query."""
from collections.abc import Callable
from typing import Any

from spotlight.native.types import DISPLAY_NAME_ATTRIBUTE, NativeQuery

ResultCallback = Callable[[Any], None]


class ResultExtractor:
    """Feeds one attribute of every result to a sink, in result order.

    Attributes:
        attribute: Metadata attribute fetched for each result.
    """

    def __init__(self, attribute: str = DISPLAY_NAME_ATTRIBUTE) -> None:
        self.attribute = attribute

    def extract(self, query: NativeQuery, sink: ResultCallback | None) -> int:
        """Fetch the attribute for indices 0..count-1 and pass each to sink.

        Count and fetches happen even when sink is missing or not callable.
        Errors from the substrate or the sink propagate and end extraction.

        Args:
            query: Native query that finished gathering.
            sink: Callable receiving each value, or None.

        Returns:
            Result count reported by the query.
        """
        count = query.result_count()
        deliver = sink if callable(sink) else None
        for index in range(count):
            value = query.value_at(index, self.attribute)
            if deliver is not None:
                deliver(value)
        return count

"""Result extractor tests."""

import pytest

from fakes import FakeSubstrate
from spotlight.native.types import DISPLAY_NAME_ATTRIBUTE
from spotlight.query.extractor import ResultExtractor


def test_extract_in_index_order(substrate: FakeSubstrate) -> None:
    """Values reach the sink once each, in ascending index order."""
    substrate.expect(["Documents", "Downloads", "Desktop"])
    query = substrate.create_query()
    received: list[str] = []

    count = ResultExtractor().extract(query, received.append)

    assert count == 3
    assert received == ["Documents", "Downloads", "Desktop"]
    assert query.fetched == [0, 1, 2]


def test_extract_without_results(substrate: FakeSubstrate) -> None:
    """An empty result set never calls the sink."""
    query = substrate.create_query()
    received: list[str] = []

    assert ResultExtractor().extract(query, received.append) == 0
    assert received == []


@pytest.mark.parametrize("sink", [None, "not-callable"])
def test_non_callable_sink_still_fetches(substrate: FakeSubstrate, sink: object) -> None:
    """A missing sink skips delivery but still reads every result."""
    substrate.expect(["a", "b"])
    query = substrate.create_query()

    assert ResultExtractor().extract(query, sink) == 2  # type: ignore[arg-type]
    assert query.fetched == [0, 1]


def test_uses_configured_attribute(substrate: FakeSubstrate) -> None:
    """The extractor asks for its configured attribute."""
    substrate.expect(["a"])
    query = substrate.create_query()
    query.fail_at = 0

    extractor = ResultExtractor("kMDItemPath")
    assert extractor.attribute == "kMDItemPath"
    with pytest.raises(KeyError, match="kMDItemPath"):
        extractor.extract(query, None)
    assert ResultExtractor().attribute == DISPLAY_NAME_ATTRIBUTE


def test_sink_error_aborts_extraction(substrate: FakeSubstrate) -> None:
    """A failing sink interrupts extraction of later results."""
    substrate.expect(["a", "b", "c"])
    query = substrate.create_query()
    received: list[str] = []

    def sink(value: str) -> None:
        if value == "b":
            raise RuntimeError("sink failed")
        received.append(value)

    with pytest.raises(RuntimeError):
        ResultExtractor().extract(query, sink)
    assert received == ["a"]
    assert query.fetched == [0, 1]

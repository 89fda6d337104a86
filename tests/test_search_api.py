"""Search endpoint tests."""

import json

from fastapi.testclient import TestClient

from fakes import FakeSubstrate
from spotlight.app import create_app
from spotlight.config import Settings

FOLDERS = "kMDItemContentType == 'public.folder'"


def test_search_returns_results(client: TestClient, substrate: FakeSubstrate) -> None:
    """Results come back with their native indices."""
    substrate.expect(["Documents", "Downloads", "Desktop"])

    response = client.get("/api/v1/search", params={"q": FOLDERS})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == FOLDERS
    assert data["attribute"] == "kMDItemDisplayName"
    assert data["total"] == 3
    assert data["results"] == [
        {"index": 0, "value": "Documents"},
        {"index": 1, "value": "Downloads"},
        {"index": 2, "value": "Desktop"},
    ]


def test_search_without_matches(client: TestClient) -> None:
    """A search with no matches returns an empty list."""
    response = client.get("/api/v1/search", params={"q": "kMDItemFSName == 'nothing'"})
    assert response.status_code == 200
    assert response.json()["results"] == []


def test_search_timeout_returns_504(client: TestClient, substrate: FakeSubstrate) -> None:
    """A query that never finishes answers 504."""
    substrate.expect(["x"], finish=False)
    response = client.get("/api/v1/search", params={"q": FOLDERS, "timeout": 0.05})
    assert response.status_code == 504
    assert "did not finish" in response.json()["error"]


def test_search_requires_query(client: TestClient) -> None:
    """An empty query is rejected by validation."""
    assert client.get("/api/v1/search", params={"q": ""}).status_code == 422


def test_search_unavailable_without_substrate(settings: Settings) -> None:
    """Without a native substrate searches answer 503."""
    client = TestClient(create_app(settings))
    response = client.get("/api/v1/search", params={"q": FOLDERS})
    assert response.status_code == 503


def test_search_requires_api_key(settings: Settings, substrate: FakeSubstrate) -> None:
    """A configured key is enforced on search endpoints."""
    settings.key = "secret"
    client = TestClient(create_app(settings, substrate=substrate))

    assert client.get("/api/v1/search", params={"q": FOLDERS}).status_code == 401
    response = client.get(
        "/api/v1/search", params={"q": FOLDERS}, headers={"X-API-Key": "wrong"}
    )
    assert response.status_code == 401

    substrate.expect(["Documents"])
    response = client.get(
        "/api/v1/search", params={"q": FOLDERS}, headers={"X-API-Key": "secret"}
    )
    assert response.status_code == 200
    assert response.json()["total"] == 1


def test_search_echoes_request_id(client: TestClient) -> None:
    """The logging middleware returns the request id."""
    response = client.get(
        "/api/v1/search",
        params={"q": FOLDERS},
        headers={"X-Request-ID": "req-1"},
    )
    assert response.headers["X-Request-ID"] == "req-1"


def parse_events(body: str) -> tuple[list[str], list[dict[str, object]]]:
    """Split an SSE body into event names and decoded data payloads."""
    lines = body.splitlines()
    events = [line.removeprefix("event:").strip() for line in lines if line.startswith("event:")]
    data = [
        json.loads(line.removeprefix("data:").strip())
        for line in lines
        if line.startswith("data:")
    ]
    return events, data


def test_search_stream_emits_results_then_complete(
    client: TestClient, substrate: FakeSubstrate
) -> None:
    """The SSE stream sends one result event per value and a complete event."""
    substrate.expect(["Documents", "Downloads"])

    with client.stream("GET", "/api/v1/search/stream", params={"q": FOLDERS}) as response:
        assert response.status_code == 200
        body = "".join(response.iter_text())

    events, data = parse_events(body)
    assert events == ["result", "result", "complete"]
    assert data[0] == {"index": 0, "value": "Documents"}
    assert data[1] == {"index": 1, "value": "Downloads"}
    assert data[2] == {"query": FOLDERS, "total": 2}


def test_search_stream_timeout_emits_error(
    client: TestClient, substrate: FakeSubstrate
) -> None:
    """A stream whose query never finishes ends with a single error event."""
    substrate.expect(["x"], finish=False)

    with client.stream(
        "GET", "/api/v1/search/stream", params={"q": FOLDERS, "timeout": 0.05}
    ) as response:
        assert response.status_code == 200
        body = "".join(response.iter_text())

    events, data = parse_events(body)
    assert events == ["error"]
    assert "did not finish" in str(data[0]["error"])


def test_api_key_query_parameter_only_on_stream(
    settings: Settings, substrate: FakeSubstrate
) -> None:
    """The api_key parameter authenticates the stream but not the JSON search."""
    settings.key = "secret"
    client = TestClient(create_app(settings, substrate=substrate))

    response = client.get("/api/v1/search", params={"q": FOLDERS, "api_key": "secret"})
    assert response.status_code == 401

    response = client.get(
        "/api/v1/search/stream", params={"q": FOLDERS, "api_key": "wrong"}
    )
    assert response.status_code == 401

    substrate.expect(["Documents"])
    with client.stream(
        "GET", "/api/v1/search/stream", params={"q": FOLDERS, "api_key": "secret"}
    ) as response:
        assert response.status_code == 200
        body = "".join(response.iter_text())

    events, _ = parse_events(body)
    assert events == ["result", "complete"]

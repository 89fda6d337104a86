"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

# Add src and tests to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient

from fakes import FakeSubstrate
from spotlight.app import create_app
from spotlight.config import Settings
from spotlight.events.router import NotificationRouter


@pytest.fixture
def settings() -> Settings:
    """Create test settings with a fast poll interval."""
    return Settings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        poll_interval_ms=1,
        search_timeout=2.0,
    )


@pytest.fixture
def substrate() -> FakeSubstrate:
    """Create an in-memory native substrate."""
    return FakeSubstrate()


@pytest.fixture
def router() -> NotificationRouter:
    """Create a router isolated from the process-wide one."""
    return NotificationRouter()


@pytest.fixture
def client(settings: Settings, substrate: FakeSubstrate) -> TestClient:
    """Create test client with the fake substrate injected."""
    app = create_app(settings, substrate=substrate)
    return TestClient(app)

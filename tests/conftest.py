"""Shared test fixtures for casemap tests.

This module provides:
- MockStore: Simulates the content store (canonical documents and status files)
- RecordingChannel / RecordingNotifier: Host channel and notifier doubles
"""

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

SAMPLE_DOCUMENT = """# v1.0.0 Test Cases

## Login

- [TC-001] Login with valid password
- [TC-002] Login with wrong password
  - [TC-003] Account locks after three attempts

## Checkout

- Cart
  - [TC-010] Pay by card
"""

# =============================================================================
# Mock content store
# =============================================================================


@dataclass
class MockStoreState:
    """Documents and status files served by MockStore, plus request tracking."""

    documents: dict[str, str] = field(default_factory=lambda: {"v1.0.0": SAMPLE_DOCUMENT})
    statuses: dict[tuple[str, str], Any] = field(default_factory=dict)
    raw_statuses: dict[tuple[str, str], str] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


class MockStore:
    """Content store served through httpx.MockTransport.

    Provides:
    - GET /cases/{version}/_index.md
    - GET /results/{version}/{user}.json
    """

    def __init__(self, state: MockStoreState | None = None):
        self.state = state or MockStoreState()

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.state.requests.append(request)
        parts = request.url.path.strip("/").split("/")

        if len(parts) == 3 and parts[0] == "cases" and parts[2] == "_index.md":
            document = self.state.documents.get(parts[1])
            if document is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, text=document)

        if len(parts) == 3 and parts[0] == "results" and parts[2].endswith(".json"):
            key = (parts[1], parts[2][: -len(".json")])
            if key in self.state.raw_statuses:
                return httpx.Response(200, text=self.state.raw_statuses[key])
            if key in self.state.statuses:
                return httpx.Response(200, text=json.dumps(self.state.statuses[key]))
            return httpx.Response(404, text="Not Found")

        return httpx.Response(404, text="Not Found")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def store_state() -> MockStoreState:
    """Fixture providing MockStore state for configuration."""
    return MockStoreState()


@pytest.fixture
def mock_store(store_state: MockStoreState) -> MockStore:
    """Fixture providing a MockStore instance."""
    return MockStore(store_state)


# =============================================================================
# Host channel and notifier doubles
# =============================================================================


class RecordingChannel:
    """Host channel that records posted messages."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def post_message(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


class RecordingNotifier:
    """Notifier that records (message, level) pairs."""

    def __init__(self) -> None:
        self.notifications: list[tuple[str, str]] = []

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append((message, level))

    @property
    def levels(self) -> list[str]:
        return [level for _, level in self.notifications]


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

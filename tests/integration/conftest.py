"""Integration-test fixtures for deterministic transport and credential behavior."""

from __future__ import annotations

from typing import Mapping

import pytest

from crptclient.http.transport import RequestsTransport, TransportResponse


class InMemoryCredentialStore:
    """Credential store double that keeps the auth token in memory."""

    def __init__(self, auth_token: str | None = None) -> None:
        """Initialize with an optional stored token."""

        self.auth_token = auth_token

    def is_available(self) -> bool:
        """Report the in-memory store as available."""

        return True

    def get_auth_token(self) -> str | None:
        """Return the stored token."""

        return self.auth_token

    def set_auth_token(self, auth_token: str) -> None:
        """Store a normalized token."""

        self.auth_token = auth_token.strip()

    def clear_auth_token(self) -> bool:
        """Clear the token and report whether one existed."""

        existed = self.auth_token is not None
        self.auth_token = None
        return existed


class RecordedExchange:
    """Canned HTTP response plus the requests the CLI sent."""

    def __init__(self) -> None:
        """Default to an accepted response."""

        self.status_code = 200
        self.body = '{"value":"accepted"}'
        self.requests: list[tuple[str, str, dict[str, str], str]] = []


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove `CRPT_*` variables so host configuration never leaks into tests."""

    for key in (
        "CRPT_API_URL",
        "CRPT_REQUEST_LIMIT",
        "CRPT_WINDOW_UNIT",
        "CRPT_TIMEOUT_SECONDS",
        "CRPT_VERIFY_TLS",
        "CRPT_AUTH_TOKEN",
        "CRPT_SIGNATURE",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Replace secure storage used by the CLI with an in-memory store."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("crptclient.cli.create_credential_store", lambda: store)
    return store


@pytest.fixture
def exchange(monkeypatch: pytest.MonkeyPatch) -> RecordedExchange:
    """Mock the HTTP transport so CLI submissions never reach the network."""

    recorded = RecordedExchange()

    def _mock_send(
        self: RequestsTransport,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str,
    ) -> TransportResponse:
        """Record the request and return the canned response."""

        _ = self
        recorded.requests.append((method, url, dict(headers), body))
        return TransportResponse(status_code=recorded.status_code, body=recorded.body)

    monkeypatch.setattr(RequestsTransport, "send", _mock_send)
    return recorded

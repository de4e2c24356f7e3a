"""HTTP transport used to deliver registration requests.

Responsibilities:
- Define the minimal `send` contract the document client depends on.
- Provide a `requests`-based implementation with a shared session.
- Map network-layer failures into `TransportError` with a failure kind.

Key types:
- `Transport`: protocol implemented by real and fake transports.
- `TransportResponse`: status code and decoded body of one response.
- `TransportError`: raised when no HTTP response was received.
- `RequestsTransport`: default `requests.Session` implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
import socket
from typing import Mapping, Protocol

import requests


class TransportError(RuntimeError):
    """Raised when a request fails below the HTTP layer."""

    def __init__(self, message: str, *, failure_kind: str = "transport") -> None:
        """Initialize transport error metadata for submission diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """HTTP status code and text body of one response."""

    status_code: int
    body: str


class Transport(Protocol):
    """Protocol for sending one HTTP request and returning its response."""

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str,
    ) -> TransportResponse:
        """Send a request or raise `TransportError` when no response arrives."""


class RequestsTransport:
    """`requests`-backed transport; non-2xx responses are returned, not raised."""

    _MAX_ERROR_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        verify_tls: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize transport settings and the underlying HTTP session."""

        self.timeout_seconds = timeout_seconds
        self.verify_tls = verify_tls
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str,
    ) -> TransportResponse:
        """Send one request and return its status code and text body."""

        try:
            response = self._session.request(
                method,
                url,
                headers=dict(headers),
                data=body.encode("utf-8"),
                timeout=self.timeout_seconds,
                verify=self.verify_tls,
            )
        except requests.RequestException as exc:
            failure_kind = self._classify_transport_failure(exc)
            if failure_kind == "timeout":
                detail = "Registration request timed out."
            else:
                detail = f"Registration request transport error: {self._short_message(str(exc))}"
            raise TransportError(detail, failure_kind=failure_kind) from exc
        except TimeoutError as exc:
            raise TransportError(
                "Registration request timed out.",
                failure_kind="timeout",
            ) from exc
        except OSError as exc:
            raise TransportError(
                f"Registration request transport error: {self._short_message(str(exc))}",
            ) from exc

        return TransportResponse(
            status_code=response.status_code,
            body=bytes(response.content).decode("utf-8", errors="replace"),
        )

    def close(self) -> None:
        """Close the session when this transport created it."""

        if self._owns_session:
            self._session.close()

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap error message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_ERROR_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_ERROR_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

"""Rate-limited client for the document registration API.

Responsibilities:
- Gate every outbound request through a fixed-window `RateLimiter`.
- Build the signed, authorized JSON `POST` request for one document.
- Classify responses into `SubmissionResult` values without raising on HTTP errors.

Key types:
- `DocumentClient`: submission entry point shared by concurrent callers.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Callable

from .http.rate_limiter import PermitCancelledError, RateLimiter, WindowUnit
from .http.transport import RequestsTransport, Transport, TransportError
from .models.codec import encode_document
from .models.datatypes import Document, SubmissionResult
from .parsing import normalize_optional_string
from .telemetry.logger import SubmissionLogger

if TYPE_CHECKING:
    from .config import ClientConfig

DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"

ResponseHook = Callable[[str], None]
DocumentEncoder = Callable[[Document], str]


def _noop_response_hook(_body: str) -> None:
    """Default response hook that ignores the body."""


class DocumentClient:
    """Submit documents to the registration API under a shared admission budget.

    At most `request_limit` submissions are admitted per `window_unit`; callers
    beyond that block until a permit is released or the window is replenished.
    """

    def __init__(
        self,
        window_unit: WindowUnit | float,
        request_limit: int,
        api_url: str = DEFAULT_API_URL,
        *,
        transport: Transport | None = None,
        encoder: DocumentEncoder = encode_document,
        response_hook: ResponseHook | None = None,
        logger: SubmissionLogger | None = None,
        timeout_seconds: float = 30.0,
        verify_tls: bool = True,
    ) -> None:
        """Validate settings, start the rate limiter, and prepare the transport."""

        normalized_url = normalize_optional_string(api_url)
        if normalized_url is None:
            raise ValueError("`api_url` must be a non-empty string.")
        if isinstance(window_unit, (WindowUnit, str)):
            window_seconds = WindowUnit.parse(window_unit).seconds
        else:
            window_seconds = window_unit

        self.api_url = normalized_url
        self.rate_limiter = RateLimiter(request_limit, window_seconds)
        self._owns_transport = transport is None
        self._transport: Transport = (
            transport
            if transport is not None
            else RequestsTransport(timeout_seconds=timeout_seconds, verify_tls=verify_tls)
        )
        self._encoder = encoder
        self._response_hook = response_hook or _noop_response_hook
        self._logger = logger or SubmissionLogger()
        self._shutdown_lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        transport: Transport | None = None,
        response_hook: ResponseHook | None = None,
        logger: SubmissionLogger | None = None,
    ) -> DocumentClient:
        """Build a client from a validated `ClientConfig`."""

        config.validate()
        return cls(
            config.window_unit,
            config.request_limit,
            config.api_url,
            transport=transport,
            response_hook=response_hook,
            logger=logger,
            timeout_seconds=config.timeout_seconds,
            verify_tls=config.verify_tls,
        )

    def __enter__(self) -> DocumentClient:
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.shutdown()

    def submit(
        self,
        document: Document,
        signature: str,
        auth_token: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SubmissionResult:
        """Submit one document and return the classified outcome.

        Blocks while the admission budget is exhausted. The permit is released
        on every exit path once it was acquired.

        Args:
            document: Document to register.
            signature: Document signature sent in the `Signature` header.
            auth_token: Bearer token sent in the `Authorization` header.
            cancel_event: Optional event that cancels waiting for a permit.

        Raises:
            ValueError: If `signature` or `auth_token` is blank.
            PermitCancelledError: If cancelled while waiting for a permit.
        """

        headers = self._build_headers(signature, auth_token)

        self._logger.log_pending(self.api_url)
        try:
            self.rate_limiter.acquire(cancel_event=cancel_event)
        except PermitCancelledError:
            self._logger.log_cancelled(self.api_url)
            raise

        try:
            self._logger.log_sending(self.api_url, self.rate_limiter.available)
            body = self._encoder(document)
            try:
                response = self._transport.send("POST", self.api_url, headers, body)
            except TransportError as exc:
                self._logger.log_transport_failure(exc.failure_kind, str(exc))
                return SubmissionResult.transport_failure(str(exc), exc.failure_kind)

            if 200 <= response.status_code < 300:
                self._logger.log_success(response.status_code, response.body)
                self.process_response_body(response.body)
                return SubmissionResult.success(response.status_code, response.body)

            self._logger.log_http_failure(response.status_code, response.body)
            return SubmissionResult.http_failure(response.status_code, response.body)
        except Exception as exc:
            self._logger.log_aborted(type(exc).__name__)
            raise
        finally:
            self.rate_limiter.release()

    def create_document(
        self,
        document: Document,
        signature: str,
        auth_token: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SubmissionResult:
        """Alias of `submit` named after the registration API operation."""

        return self.submit(document, signature, auth_token, cancel_event=cancel_event)

    def process_response_body(self, body: str) -> None:
        """Handle the body of an accepted response; override or pass `response_hook`."""

        self._response_hook(body)

    def shutdown(self) -> None:
        """Stop the replenishment schedule and close an owned transport."""

        with self._shutdown_lock:
            if self._closed:
                return
            self._closed = True
        self.rate_limiter.shutdown()
        if self._owns_transport and isinstance(self._transport, RequestsTransport):
            self._transport.close()

    @staticmethod
    def _build_headers(signature: str, auth_token: str) -> dict[str, str]:
        """Build JSON, signature, and bearer authorization headers."""

        normalized_signature = normalize_optional_string(signature)
        if normalized_signature is None:
            raise ValueError("`signature` must be a non-empty string.")
        normalized_token = normalize_optional_string(auth_token)
        if normalized_token is None:
            raise ValueError("`auth_token` must be a non-empty string.")
        return {
            "Content-Type": "application/json",
            "Signature": normalized_signature,
            "Authorization": f"Bearer {normalized_token}",
        }

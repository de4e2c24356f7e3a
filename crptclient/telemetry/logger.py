"""Structured submission logging utilities.

Responsibilities:
- Emit concise, deterministic submission lifecycle logs through `loguru`.
- Keep secrets (tokens, signatures) out of log lines.
"""

from __future__ import annotations

import re
from typing import TextIO

from loguru import logger as _loguru_logger

from ..models.datatypes import SubmissionState

_MAX_BODY_CHARS = 180


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def redact_sensitive_tokens(text: str) -> str:
    """Redact bearer tokens from response or error text."""

    return re.sub(
        r"(?i)bearer\s+[A-Za-z0-9._~+/=-]{8,}",
        "Bearer [redacted-token]",
        text,
    )


def shorten_body(text: str) -> str:
    """Normalize whitespace, redact tokens, and cap body length for log lines."""

    compact = " ".join(redact_sensitive_tokens(text).split())
    if len(compact) <= _MAX_BODY_CHARS:
        return compact
    return f"{compact[: _MAX_BODY_CHARS - 1]}..."


class SubmissionLogger:
    """Emit deterministic submission lifecycle logs.

    Lines are routed through a `loguru` logger bound to this instance. When a
    sink is given, a dedicated handler writes only this instance's lines to it;
    otherwise the application's loguru configuration applies.
    """

    def __init__(self, sink: TextIO | None = None, *, level: str = "INFO") -> None:
        """Bind a loguru logger and optionally attach a dedicated sink."""

        self._logger = _loguru_logger.bind(submission_logger=id(self))
        self._handler_id: int | None = None
        if sink is not None:
            owner = id(self)
            self._handler_id = _loguru_logger.add(
                sink,
                format="{message}",
                level=level,
                colorize=False,
                filter=lambda record: record["extra"].get("submission_logger") == owner,
            )

    def close(self) -> None:
        """Detach the dedicated sink handler, if one was attached."""

        if self._handler_id is not None:
            _loguru_logger.remove(self._handler_id)
            self._handler_id = None

    def _emit(self, level: str, state: SubmissionState, event: str, **context: object) -> None:
        """Emit one structured submission log line."""

        line = (
            f"[submission] level={level} state={state.value} event={event}"
            f"{_format_context(context)}"
        )
        self._logger.log(level, line)

    def log_pending(self, url: str) -> None:
        """Emit a waiting-for-permit event."""

        self._emit("DEBUG", SubmissionState.PENDING, "awaiting_permit", url=url)

    def log_cancelled(self, url: str) -> None:
        """Emit an event for a submission cancelled before sending."""

        self._emit("WARNING", SubmissionState.PENDING, "cancelled", url=url)

    def log_sending(self, url: str, available: int) -> None:
        """Emit a permit-granted event right before the request is sent."""

        self._emit("DEBUG", SubmissionState.SENDING, "permit_acquired", available=available, url=url)

    def log_success(self, status_code: int, body: str) -> None:
        """Emit an accepted-response event with a shortened body."""

        self._emit(
            "INFO",
            SubmissionState.COMPLETED,
            "success",
            status=status_code,
        )
        self._logger.info("Registration API accepted document: {}", shorten_body(body))

    def log_http_failure(self, status_code: int, body: str) -> None:
        """Emit a non-2xx response event with a shortened body."""

        self._emit("WARNING", SubmissionState.COMPLETED, "http_error", status=status_code)
        self._logger.warning(
            "Registration API error: HTTP {} body: {}",
            status_code,
            shorten_body(body),
        )

    def log_transport_failure(self, failure_kind: str, detail: str) -> None:
        """Emit a transport failure event without request secrets."""

        self._emit("ERROR", SubmissionState.COMPLETED, "transport_error", failure_kind=failure_kind)
        self._logger.error("Registration request failed: {}", shorten_body(detail))

    def log_aborted(self, error_type: str) -> None:
        """Emit an event for a submission aborted by an unexpected exception."""

        self._emit("ERROR", SubmissionState.COMPLETED, "aborted", error_type=error_type)

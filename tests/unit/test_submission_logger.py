"""Unit tests for structured submission logging."""

from __future__ import annotations

import io

from crptclient.telemetry.logger import SubmissionLogger, shorten_body


def test_submission_logger_emits_sorted_sanitized_event_lines() -> None:
    """Lifecycle events should be single deterministic lines with sorted context."""

    sink = io.StringIO()
    logger = SubmissionLogger(sink=sink, level="DEBUG")
    try:
        logger.log_pending("https://example.test/create")
        logger.log_sending("https://example.test/create", available=0)
        logger.log_aborted("Type Error")
    finally:
        logger.close()

    lines = sink.getvalue().splitlines()
    assert lines == [
        "[submission] level=DEBUG state=pending event=awaiting_permit "
        "url=https://example.test/create",
        "[submission] level=DEBUG state=sending event=permit_acquired available=0 "
        "url=https://example.test/create",
        "[submission] level=ERROR state=completed event=aborted error_type=Type_Error",
    ]


def test_submission_logger_respects_sink_level_and_close() -> None:
    """Debug events are filtered at INFO, and nothing is written after close."""

    sink = io.StringIO()
    logger = SubmissionLogger(sink=sink)
    logger.log_pending("https://example.test/create")
    logger.log_success(200, '{"status":"success"}')
    logger.close()
    logger.log_success(200, "after close")

    output = sink.getvalue()
    assert "awaiting_permit" not in output
    assert "[submission] level=INFO state=completed event=success status=200" in output
    assert 'Registration API accepted document: {"status":"success"}' in output
    assert "after close" not in output


def test_submission_loggers_do_not_share_sinks() -> None:
    """Each logger's sink should only receive that logger's lines."""

    first_sink = io.StringIO()
    second_sink = io.StringIO()
    first = SubmissionLogger(sink=first_sink)
    second = SubmissionLogger(sink=second_sink)
    try:
        first.log_http_failure(500, "first body")
    finally:
        first.close()
        second.close()

    assert "first body" in first_sink.getvalue()
    assert second_sink.getvalue() == ""


def test_shorten_body_redacts_bearer_tokens_and_caps_length() -> None:
    """Logged bodies should never echo bearer tokens and stay short."""

    redacted = shorten_body('{"echo": "Authorization: Bearer abcdefghijklmnop"}')
    assert "abcdefghijklmnop" not in redacted
    assert "Bearer [redacted-token]" in redacted

    long_body = "x" * 500
    shortened = shorten_body(long_body)
    assert len(shortened) == 182
    assert shortened.endswith("...")

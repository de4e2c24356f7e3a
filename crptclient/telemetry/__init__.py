"""Telemetry helpers for submission logging."""

from .logger import SubmissionLogger

__all__ = ["SubmissionLogger"]

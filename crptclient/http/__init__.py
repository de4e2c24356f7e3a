"""HTTP-facing building blocks: admission control and request transport."""

from .rate_limiter import (
    PermitCancelledError,
    PermitError,
    PermitTimeoutError,
    RateLimiter,
    WindowUnit,
)
from .transport import RequestsTransport, Transport, TransportError, TransportResponse

__all__ = [
    "PermitCancelledError",
    "PermitError",
    "PermitTimeoutError",
    "RateLimiter",
    "WindowUnit",
    "RequestsTransport",
    "Transport",
    "TransportError",
    "TransportResponse",
]

"""Top-level package for crptclient.

This package provides a rate-limited client for submitting documents to a
remote registration API. The main entry point is `DocumentClient`, which gates
requests through a fixed-window `RateLimiter`.
"""

from .client import DocumentClient
from .http.rate_limiter import RateLimiter, WindowUnit
from .models.datatypes import Description, Document, Product, SubmissionResult

__all__ = [
    "Description",
    "Document",
    "DocumentClient",
    "Product",
    "RateLimiter",
    "SubmissionResult",
    "WindowUnit",
    "__version__",
]

__version__ = "0.1.0"

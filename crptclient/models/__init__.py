"""Document value objects, submission results, and their JSON wire mapping."""

from .codec import decode_document, encode_document
from .datatypes import (
    Description,
    Document,
    Product,
    SubmissionOutcome,
    SubmissionResult,
    SubmissionState,
)

__all__ = [
    "Description",
    "Document",
    "Product",
    "SubmissionOutcome",
    "SubmissionResult",
    "SubmissionState",
    "decode_document",
    "encode_document",
]

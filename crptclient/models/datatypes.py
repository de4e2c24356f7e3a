"""Core datatypes shared across crptclient modules.

Responsibilities:
- Represent immutable document records passed to the registration API.
- Represent the per-call outcome of one submission.

Key types:
- `Description`, `Product`, `Document`: document payload value objects.
- `SubmissionOutcome`, `SubmissionState`, `SubmissionResult`: call outcome records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Description:
    """Document description block.

    Attributes:
        participant_inn: Taxpayer identifier of the submitting participant.
    """

    participant_inn: str | None = None


@dataclass(frozen=True, slots=True)
class Product:
    """One product entry of a document.

    Attributes:
        certificate_document: Certificate document kind.
        certificate_document_date: Certificate issue date (`YYYY-MM-DD`).
        certificate_document_number: Certificate number.
        owner_inn: Owner taxpayer identifier.
        producer_inn: Producer taxpayer identifier.
        production_date: Production date (`YYYY-MM-DD`).
        tnved_code: Commodity nomenclature code.
        uit_code: Unique identification code of the item.
        uitu_code: Unique identification code of the transport package.
    """

    certificate_document: str | None = None
    certificate_document_date: str | None = None
    certificate_document_number: str | None = None
    owner_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    tnved_code: str | None = None
    uit_code: str | None = None
    uitu_code: str | None = None


@dataclass(frozen=True, slots=True)
class Document:
    """A goods-introduction document submitted for registration.

    Attributes:
        description: Optional description block.
        doc_id: Document identifier.
        doc_status: Document status (for example `DRAFT`).
        doc_type: Document type (for example `LP_INTRODUCE_GOODS`).
        import_request: Whether the goods are imported.
        owner_inn: Owner taxpayer identifier.
        participant_inn: Participant taxpayer identifier.
        producer_inn: Producer taxpayer identifier.
        production_date: Production date (`YYYY-MM-DD`).
        production_type: Production type.
        products: Ordered product entries.
        reg_date: Registration date.
        reg_number: Registration number.
    """

    description: Description | None = None
    doc_id: str | None = None
    doc_status: str | None = None
    doc_type: str | None = None
    import_request: bool = False
    owner_inn: str | None = None
    participant_inn: str | None = None
    producer_inn: str | None = None
    production_date: str | None = None
    production_type: str | None = None
    products: tuple[Product, ...] = field(default_factory=tuple)
    reg_date: str | None = None
    reg_number: str | None = None


class SubmissionOutcome(str, Enum):
    """Classification of one finished submission."""

    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"


class SubmissionState(str, Enum):
    """Lifecycle of one submission: pending, then sending, then completed."""

    PENDING = "pending"
    SENDING = "sending"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    """Outcome of one `DocumentClient.submit` call.

    Attributes:
        outcome: Success, non-2xx HTTP response, or transport failure.
        status_code: HTTP status code, or `None` when no response was received.
        body: Response body text (empty for transport failures).
        error: Human-readable failure detail, `None` on success.
        failure_kind: Transport failure kind (`timeout`, `transport`), when applicable.
    """

    outcome: SubmissionOutcome
    status_code: int | None = None
    body: str = ""
    error: str | None = None
    failure_kind: str | None = None

    @property
    def ok(self) -> bool:
        """Return whether the submission was accepted by the API."""

        return self.outcome is SubmissionOutcome.SUCCESS

    @classmethod
    def success(cls, status_code: int, body: str) -> SubmissionResult:
        """Build a success result for a 2xx response."""

        return cls(outcome=SubmissionOutcome.SUCCESS, status_code=status_code, body=body)

    @classmethod
    def http_failure(cls, status_code: int, body: str) -> SubmissionResult:
        """Build a failure result for a non-2xx response."""

        return cls(
            outcome=SubmissionOutcome.HTTP_ERROR,
            status_code=status_code,
            body=body,
            error=f"Registration API responded with HTTP {status_code}.",
        )

    @classmethod
    def transport_failure(cls, error: str, failure_kind: str) -> SubmissionResult:
        """Build a failure result for a request that received no response."""

        return cls(
            outcome=SubmissionOutcome.TRANSPORT_ERROR,
            error=error,
            failure_kind=failure_kind,
        )

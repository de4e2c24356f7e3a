"""JSON wire mapping for registration documents.

Responsibilities:
- Encode `Document` values using the registration API field names.
- Decode document JSON files into `Document` values with type checks.

Unset (`None`) fields are omitted from encoded payloads; unknown keys are
ignored on decode.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from .datatypes import Description, Document, Product

# Python attribute name -> wire field name; fields not listed keep their name.
_DOCUMENT_WIRE_NAMES = {"import_request": "importRequest"}
_DESCRIPTION_WIRE_NAMES = {"participant_inn": "participantInn"}

_DOCUMENT_STRING_FIELDS = (
    "doc_id",
    "doc_status",
    "doc_type",
    "owner_inn",
    "participant_inn",
    "producer_inn",
    "production_date",
    "production_type",
    "reg_date",
    "reg_number",
)
_PRODUCT_STRING_FIELDS = (
    "certificate_document",
    "certificate_document_date",
    "certificate_document_number",
    "owner_inn",
    "producer_inn",
    "production_date",
    "tnved_code",
    "uit_code",
    "uitu_code",
)


def encode_document(document: Document) -> str:
    """Serialize a document into the registration API JSON payload."""

    return json.dumps(document_to_payload(document), ensure_ascii=False)


def decode_document(raw_json: str) -> Document:
    """Parse registration API JSON into a `Document`.

    Raises:
        ValueError: If the text is not valid JSON or a field has the wrong type.
    """

    try:
        payload = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Document JSON is invalid: {exc.msg} (line {exc.lineno}).") from exc
    return document_from_payload(payload)


def document_to_payload(document: Document) -> dict[str, Any]:
    """Map a document to a JSON-ready dictionary keyed by wire field names."""

    payload: dict[str, Any] = {}
    if document.description is not None:
        payload["description"] = _description_to_payload(document.description)
    for name in ("doc_id", "doc_status", "doc_type"):
        _put_optional(payload, name, getattr(document, name))
    payload[_DOCUMENT_WIRE_NAMES["import_request"]] = document.import_request
    for name in (
        "owner_inn",
        "participant_inn",
        "producer_inn",
        "production_date",
        "production_type",
    ):
        _put_optional(payload, name, getattr(document, name))
    payload["products"] = [_product_to_payload(product) for product in document.products]
    _put_optional(payload, "reg_date", document.reg_date)
    _put_optional(payload, "reg_number", document.reg_number)
    return payload


def document_from_payload(payload: object) -> Document:
    """Build a document from a decoded JSON object."""

    mapping = _require_mapping(payload, "document")

    description = None
    if mapping.get("description") is not None:
        description_payload = _require_mapping(mapping["description"], "description")
        description = Description(
            participant_inn=_optional_string(
                description_payload,
                _DESCRIPTION_WIRE_NAMES["participant_inn"],
                "description",
            )
        )

    import_request_key = _DOCUMENT_WIRE_NAMES["import_request"]
    import_request = mapping.get(import_request_key, False)
    if import_request is None:
        import_request = False
    if not isinstance(import_request, bool):
        raise ValueError(f"Document field `{import_request_key}` must be a boolean.")

    raw_products = mapping.get("products")
    if raw_products is None:
        raw_products = []
    if not isinstance(raw_products, list):
        raise ValueError("Document field `products` must be a list.")
    products = tuple(
        _product_from_payload(item, f"products[{index}]")
        for index, item in enumerate(raw_products)
    )

    strings = {name: _optional_string(mapping, name, "document") for name in _DOCUMENT_STRING_FIELDS}
    return Document(
        description=description,
        import_request=import_request,
        products=products,
        **strings,
    )


def _description_to_payload(description: Description) -> dict[str, Any]:
    """Map a description block to wire field names."""

    payload: dict[str, Any] = {}
    _put_optional(payload, _DESCRIPTION_WIRE_NAMES["participant_inn"], description.participant_inn)
    return payload


def _product_to_payload(product: Product) -> dict[str, Any]:
    """Map a product entry to wire field names."""

    payload: dict[str, Any] = {}
    for name in _PRODUCT_STRING_FIELDS:
        _put_optional(payload, name, getattr(product, name))
    return payload


def _product_from_payload(payload: object, label: str) -> Product:
    """Build a product entry from a decoded JSON object."""

    mapping = _require_mapping(payload, label)
    return Product(**{name: _optional_string(mapping, name, label) for name in _PRODUCT_STRING_FIELDS})


def _put_optional(payload: dict[str, Any], key: str, value: object) -> None:
    """Set a payload key only when the value is present."""

    if value is not None:
        payload[key] = value


def _require_mapping(value: object, label: str) -> Mapping[str, Any]:
    """Require a JSON object at the given location."""

    if not isinstance(value, Mapping):
        raise ValueError(f"Document `{label}` must be a JSON object.")
    return value


def _optional_string(mapping: Mapping[str, Any], key: str, label: str) -> str | None:
    """Read an optional string field, rejecting non-string values."""

    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Document `{label}` field `{key}` must be a string.")
    return value

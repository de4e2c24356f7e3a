"""Shared parsing helpers for configuration and CLI value normalization."""

from __future__ import annotations


_TRUE_BOOLEAN_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_BOOLEAN_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_permissive_boolean(value: object) -> bool | None:
    """Parse a permissive boolean token and return `None` for invalid values."""

    if isinstance(value, bool):
        return value

    normalized = normalize_optional_string(value)
    if normalized is None:
        return None

    token = normalized.lower()
    if token in _TRUE_BOOLEAN_TOKENS:
        return True
    if token in _FALSE_BOOLEAN_TOKENS:
        return False
    return None


def parse_positive_number(value: object, field_name: str, *, integer: bool) -> int | float:
    """Parse a strictly positive integer or float from a raw value.

    Args:
        value: Raw value (number or numeric text).
        field_name: Field name for an actionable validation error message.
        integer: Whether only whole numbers are accepted.

    Raises:
        ValueError: If the value is not a positive number of the requested kind.
    """

    kind = "integer" if integer else "number"
    message = f"`{field_name}` must be a positive {kind}."
    if isinstance(value, bool):
        raise ValueError(message)

    parsed: int | float
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float) and not integer:
        parsed = value
    else:
        normalized = normalize_optional_string(value)
        if normalized is None:
            raise ValueError(message)
        try:
            parsed = int(normalized) if integer else float(normalized)
        except ValueError as exc:
            raise ValueError(message) from exc

    if parsed <= 0:
        raise ValueError(message)
    return parsed

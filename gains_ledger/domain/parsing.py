"""Shared ledger field normalization helpers.

This module centralizes text, kind, and numeric normalization used by the CSV
loader and the HTTP API so both entry surfaces hand the engines identical
transaction contracts.
"""

from __future__ import annotations

import math

from .models import TransactionKind

_DOMAIN_NULL_SENTINELS = frozenset({"-", "--", "N/A", "nan", "NaN"})

_DOMAIN_KIND_ALIASES = {
    "buy": TransactionKind.BUY,
    "sell": TransactionKind.SELL,
}


def domain_normalize_optional_text(value: object | None) -> str | None:
    """Normalize one optional text value using shared null-sentinel policy.

    Args:
        value: Candidate value from a source row.

    Returns:
        str | None: Normalized text value or None when missing/sentinel.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None

    normalized_value = str(value).strip()
    if not normalized_value:
        return None
    if normalized_value in _DOMAIN_NULL_SENTINELS:
        return None
    return normalized_value


def domain_normalize_transaction_kind(value: object | None) -> TransactionKind:
    """Normalize one source kind value case-insensitively.

    Args:
        value: Source kind text such as `BUY`, `Sell`, or `deposit`.

    Returns:
        TransactionKind: Matching kind, `UNKNOWN` for anything unrecognized.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if isinstance(value, TransactionKind):
        return value

    normalized_value = domain_normalize_optional_text(value)
    if normalized_value is None:
        return TransactionKind.UNKNOWN
    return _DOMAIN_KIND_ALIASES.get(normalized_value.lower(), TransactionKind.UNKNOWN)


def domain_parse_float(value: object, field_name: str) -> float:
    """Parse one numeric source value into a finite float.

    Thousands separators and surrounding whitespace are accepted.

    Args:
        value: Numeric or text source value.
        field_name: Field label used in error messages.

    Returns:
        float: Parsed finite value.

    Raises:
        ValueError: Raised when the value is missing, non-numeric, or not finite.
    """

    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be numeric, got boolean")

    if isinstance(value, (int, float)):
        parsed_value = float(value)
        if math.isnan(parsed_value):
            raise ValueError(f"{field_name} must not be blank")
    else:
        normalized_value = domain_normalize_optional_text(value)
        if normalized_value is None:
            raise ValueError(f"{field_name} must not be blank")
        try:
            parsed_value = float(normalized_value.replace(",", ""))
        except ValueError as error:
            raise ValueError(f"{field_name} is not a valid number: {normalized_value!r}") from error

    if not math.isfinite(parsed_value):
        raise ValueError(f"{field_name} must be finite")
    return parsed_value


__all__ = [
    "domain_normalize_optional_text",
    "domain_normalize_transaction_kind",
    "domain_parse_float",
]

"""Source-to-canonical column mapping for exchange statement exports."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

# Column headers of the THB exchange statement export.
DEFAULT_STATEMENT_COLUMN_MAP = MappingProxyType(
    {
        "Order NUM": "order_id",
        "Digital Asset Short Name": "asset",
        "Transaction Date &Time": "timestamp",
        "Transaction Types": "kind",
        "Volume Amount/Execution Volume Amount": "quantity",
        "Currency Price/Execution price (THB)": "unit_price",
        "Value (THB)/Execution Value in THB": "gross_value",
        "Fee (THB)": "fee",
        "NET in THB (Fee Included)": "net_value",
    }
)

REQUIRED_CANONICAL_COLUMNS = (
    "order_id",
    "timestamp",
    "asset",
    "kind",
    "quantity",
    "unit_price",
    "gross_value",
)


def loader_resolve_column_name(source_column: object, column_map: Mapping[str, str]) -> str:
    """Resolve one source header to its canonical name.

    Headers already in canonical form, or unknown to the map, pass through
    stripped.

    Args:
        source_column: Header value from the CSV file.
        column_map: Source header to canonical name mapping.

    Returns:
        str: Canonical column name.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    stripped_column = str(source_column).strip()
    return column_map.get(stripped_column, stripped_column)


def loader_missing_required_columns(columns: list[str]) -> list[str]:
    """Return required canonical columns absent from a header list."""

    present_columns = set(columns)
    return [column for column in REQUIRED_CANONICAL_COLUMNS if column not in present_columns]


__all__ = [
    "DEFAULT_STATEMENT_COLUMN_MAP",
    "REQUIRED_CANONICAL_COLUMNS",
    "loader_missing_required_columns",
    "loader_resolve_column_name",
]

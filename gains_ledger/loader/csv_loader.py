"""CSV statement loader producing normalized ledger transactions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import glob
import io
import logging
import os

import pandas as pd

from gains_ledger.domain import (
    LedgerTransaction,
    domain_normalize_optional_text,
    domain_normalize_transaction_kind,
    domain_parse_float,
)

from .column_mapping import (
    DEFAULT_STATEMENT_COLUMN_MAP,
    loader_missing_required_columns,
    loader_resolve_column_name,
)
from .interfaces import LedgerLoadError

logger = logging.getLogger(__name__)


def loader_discover_files(pattern: str) -> tuple[str, ...]:
    """Return statement files matching a glob pattern in sorted order.

    Args:
        pattern: Glob pattern; `**` matches nested directories.

    Returns:
        tuple[str, ...]: Matching regular file paths.

    Raises:
        ValueError: Raised when pattern is blank.
    """

    if not pattern or not pattern.strip():
        raise ValueError("pattern must not be blank")
    return tuple(sorted(path for path in glob.glob(pattern.strip(), recursive=True) if os.path.isfile(path)))


def loader_read_transactions(
    file_path: str,
    skiprows: int = 2,
    column_map: Mapping[str, str] = DEFAULT_STATEMENT_COLUMN_MAP,
) -> tuple[LedgerTransaction, ...]:
    """Read one statement CSV into ordered normalized transactions.

    The first `skiprows` lines hold statement metadata and are dropped before
    the remaining text is parsed as a headed CSV table.

    Args:
        file_path: Source CSV path.
        skiprows: Number of leading lines to drop.
        column_map: Source header to canonical name mapping.

    Returns:
        tuple[LedgerTransaction, ...]: Transactions in file row order.

    Raises:
        LedgerLoadError: Raised when the file is unreadable or not UTF-8, too
            short, missing required columns, or holds an unparseable row.
    """

    if skiprows < 0:
        raise LedgerLoadError(f"skiprows must be >= 0, got {skiprows}", file_path=file_path)

    try:
        with open(file_path, encoding="utf-8-sig") as source_file:
            lines = source_file.read().splitlines()
    except OSError as error:
        raise LedgerLoadError(f"cannot read file ({file_path}): {error}", file_path=file_path) from error
    except UnicodeDecodeError as error:
        raise LedgerLoadError(f"cannot decode file ({file_path}) as UTF-8: {error}", file_path=file_path) from error

    if skiprows >= len(lines):
        raise LedgerLoadError(
            f"skiprows ({skiprows}) >= total lines in file ({file_path}).",
            file_path=file_path,
        )

    csv_text = "\n".join(lines[skiprows:])
    try:
        frame = pd.read_csv(io.StringIO(csv_text), dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as error:
        raise LedgerLoadError(f"invalid CSV content in file ({file_path}): {error}", file_path=file_path) from error

    frame = frame.rename(columns=lambda column: loader_resolve_column_name(column, column_map))
    missing_columns = loader_missing_required_columns(list(frame.columns))
    if missing_columns:
        raise LedgerLoadError(
            f"missing required columns in file ({file_path}): {', '.join(missing_columns)}",
            file_path=file_path,
        )

    transactions: list[LedgerTransaction] = []
    # Line numbers are 1-based and account for the skipped lines and the header.
    for line_number, row in enumerate(frame.to_dict(orient="records"), start=skiprows + 2):
        try:
            transactions.append(loader_build_transaction(row))
        except ValueError as error:
            raise LedgerLoadError(
                f"invalid row at line {line_number} in file ({file_path}): {error}",
                file_path=file_path,
            ) from error

    logger.info("loaded file=%s transactions=%d", file_path, len(transactions))
    return tuple(transactions)


def loader_build_transaction(row: Mapping[str, object]) -> LedgerTransaction:
    """Build one normalized transaction from a canonical-keyed row.

    Args:
        row: Row mapping keyed by canonical column names.

    Returns:
        LedgerTransaction: Normalized transaction.

    Raises:
        ValueError: Raised when a numeric field cannot be parsed.
    """

    return LedgerTransaction(
        order_id=domain_normalize_optional_text(row.get("order_id")) or "",
        timestamp=domain_normalize_optional_text(row.get("timestamp")) or "",
        asset=domain_normalize_optional_text(row.get("asset")) or "",
        kind=domain_normalize_transaction_kind(row.get("kind")),
        quantity=domain_parse_float(row.get("quantity"), "quantity"),
        unit_price=domain_parse_float(row.get("unit_price"), "unit_price"),
        gross_value=domain_parse_float(row.get("gross_value"), "gross_value"),
    )


@dataclass(frozen=True)
class CsvStatementLoader:
    """Concrete CSV loader bound to one skiprows and column-map configuration.

    Attributes:
        skiprows: Number of leading metadata lines per file.
        column_map: Source header to canonical name mapping.
    """

    skiprows: int = 2
    column_map: Mapping[str, str] = field(default_factory=lambda: DEFAULT_STATEMENT_COLUMN_MAP)

    def loader_read_transactions(self, file_path: str) -> tuple[LedgerTransaction, ...]:
        """Read one file with the bound configuration.

        Args:
            file_path: Source CSV path.

        Returns:
            tuple[LedgerTransaction, ...]: Transactions in file row order.

        Raises:
            LedgerLoadError: Raised when the file cannot be loaded.
        """

        return loader_read_transactions(file_path=file_path, skiprows=self.skiprows, column_map=self.column_map)


__all__ = [
    "CsvStatementLoader",
    "loader_build_transaction",
    "loader_discover_files",
    "loader_read_transactions",
]

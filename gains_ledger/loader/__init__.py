"""Loader layer package for statement discovery, column mapping and parsing."""

from .interfaces import LedgerLoadError, TransactionLoaderPort
from .column_mapping import DEFAULT_STATEMENT_COLUMN_MAP, REQUIRED_CANONICAL_COLUMNS
from .csv_loader import CsvStatementLoader, loader_build_transaction, loader_discover_files, loader_read_transactions

__all__ = [
	"LedgerLoadError",
	"TransactionLoaderPort",
	"DEFAULT_STATEMENT_COLUMN_MAP",
	"REQUIRED_CANONICAL_COLUMNS",
	"CsvStatementLoader",
	"loader_build_transaction",
	"loader_discover_files",
	"loader_read_transactions",
]

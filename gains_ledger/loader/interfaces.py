"""Typed interfaces and errors for statement loading."""

from __future__ import annotations

from typing import Protocol

from gains_ledger.domain import LedgerTransaction


class LedgerLoadError(ValueError):
    """Raised when one statement file cannot be turned into normalized transactions.

    Attributes:
        file_path: Source file that failed to load.
    """

    def __init__(self, message: str, file_path: str | None = None):
        super().__init__(message)
        self.file_path = file_path


class TransactionLoaderPort(Protocol):
    """Port definition for reading normalized transactions from one source file."""

    def loader_read_transactions(self, file_path: str) -> tuple[LedgerTransaction, ...]:
        """Read one source file into ordered normalized transactions.

        Args:
            file_path: Source file path.

        Returns:
            tuple[LedgerTransaction, ...]: Transactions in file order.

        Raises:
            LedgerLoadError: Raised when the file cannot be read or parsed.
        """

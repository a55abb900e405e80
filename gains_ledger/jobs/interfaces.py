"""Typed interfaces for job-layer gains report orchestration."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from gains_ledger.domain import LedgerTransaction
from gains_ledger.ledger import LedgerRunResult

JOB_STATUS_SUCCESS = "success"
JOB_STATUS_FAILED = "failed"


@dataclass(frozen=True)
class FileGainsResult:
    """Per-source gains output for every requested engine.

    Attributes:
        source_label: File path or caller-supplied label of the source.
        status: `success` or `failed`.
        runs: Engine runs keyed by method label, empty when loading failed.
        transaction_count: Number of transactions fed to the engines.
        error_message: Load failure detail when status is `failed`.
    """

    source_label: str
    status: str
    runs: dict[str, LedgerRunResult] = field(default_factory=dict)
    transaction_count: int = 0
    error_message: str | None = None

    def job_total_for(self, method: str) -> float:
        """Return the realized-gain total of one engine.

        Args:
            method: Engine method label.

        Returns:
            float: Engine total, 0.0 when the engine did not run.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        run_result = self.runs.get(method)
        return 0.0 if run_result is None else run_result.total_realized_gain


@dataclass(frozen=True)
class GainsReportResult:
    """Multi-file gains report output.

    Attributes:
        method: Requested method (`fifo`, `ma`, or `both`).
        partitioned_by_asset: Whether engines ran once per asset.
        file_results: Per-file results in processing order.
        grand_totals: Sum of per-file totals per engine, successful files only.
        status: `success` when every file loaded, else `failed`.
        timeline: Structured stage events for the run.
    """

    method: str
    partitioned_by_asset: bool
    file_results: tuple[FileGainsResult, ...]
    grand_totals: dict[str, float]
    status: str
    timeline: list[dict[str, object]] = field(default_factory=list)

    def job_failed_sources(self) -> list[str]:
        """Return labels of sources that failed to load."""

        return [result.source_label for result in self.file_results if result.status == JOB_STATUS_FAILED]


class GainsJobPort(Protocol):
    """Port definition for running gains computations over sources."""

    def job_supported_methods(self) -> tuple[str, ...]:
        """Return calculation methods this orchestrator accepts.

        Returns:
            tuple[str, ...]: Supported method labels.

        Raises:
            RuntimeError: Raised when method metadata is unavailable.
        """

    def job_execute_files(self, file_paths: Sequence[str]) -> GainsReportResult:
        """Run configured engines over every file.

        Args:
            file_paths: Statement file paths in processing order.

        Returns:
            GainsReportResult: Per-file and grand-total output.

        Raises:
            RuntimeError: Raised for unexpected execution failures.
        """

    def job_execute_transactions(
        self,
        transactions: Iterable[LedgerTransaction],
        source_label: str = "inline",
    ) -> FileGainsResult:
        """Run configured engines over an in-memory transaction sequence.

        Args:
            transactions: Chronologically ordered transactions.
            source_label: Label reported for the source.

        Returns:
            FileGainsResult: Engine runs for the sequence.

        Raises:
            RuntimeError: Raised for unexpected execution failures.
        """

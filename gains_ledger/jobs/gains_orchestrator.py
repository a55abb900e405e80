"""Job-layer gains report orchestrator with per-file isolation and stage timeline."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import logging

from tqdm import tqdm

from gains_ledger.domain import LedgerTransaction, domain_build_stage_event, domain_timeline_failed_stages
from gains_ledger.ledger import (
    GAINS_METHOD_CHOICES,
    LedgerRunResult,
    ledger_normalize_method,
    ledger_resolve_engines,
    ledger_run_engine,
)
from gains_ledger.loader import CsvStatementLoader, LedgerLoadError, TransactionLoaderPort

from .interfaces import (
    JOB_STATUS_FAILED,
    JOB_STATUS_SUCCESS,
    FileGainsResult,
    GainsJobPort,
    GainsReportResult,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GainsReportConfig:
    """Configuration values for gains report execution.

    Attributes:
        method: Calculation method (`fifo`, `ma`, or `both`).
        skiprows: Leading metadata lines skipped per file by the default loader.
        partition_by_asset: Whether engines run once per asset instead of once per file.
        show_progress: Whether file iteration displays a progress bar.
    """

    method: str = "both"
    skiprows: int = 2
    partition_by_asset: bool = False
    show_progress: bool = False


class GainsReportOrchestrator(GainsJobPort):
    """Concrete orchestrator running cost-basis engines over statement files."""

    def __init__(self, config: GainsReportConfig, loader: TransactionLoaderPort | None = None):
        """Initialize orchestrator dependencies.

        Args:
            config: Report execution configuration.
            loader: Optional transaction loader, defaults to the CSV statement loader.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        if config is None:
            raise ValueError("config must not be None")
        if config.skiprows < 0:
            raise ValueError("config.skiprows must be >= 0")

        self._method = ledger_normalize_method(config.method)
        self._config = config
        self._loader = loader or CsvStatementLoader(skiprows=config.skiprows)

    def job_supported_methods(self) -> tuple[str, ...]:
        """Return supported calculation methods.

        Returns:
            tuple[str, ...]: Supported method labels.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return GAINS_METHOD_CHOICES

    def job_execute_files(self, file_paths: Sequence[str]) -> GainsReportResult:
        """Run configured engines over every file, isolating load failures per file.

        Args:
            file_paths: Statement file paths in processing order.

        Returns:
            GainsReportResult: Per-file results, grand totals and timeline.

        Raises:
            RuntimeError: Unexpected engine failures propagate unchanged.
        """

        timeline: list[dict[str, object]] = [
            domain_build_stage_event(
                stage="run",
                status="started",
                details={
                    "method": self._method,
                    "file_count": len(file_paths),
                    "partition_by_asset": self._config.partition_by_asset,
                },
            )
        ]

        file_results: list[FileGainsResult] = []
        for file_path in tqdm(file_paths, desc="files", unit="file", disable=not self._config.show_progress):
            file_results.append(self._job_process_file(file_path=file_path, timeline=timeline))

        grand_totals = {engine.ledger_method_name(): 0.0 for engine in ledger_resolve_engines(self._method)}
        for file_result in file_results:
            if file_result.status != JOB_STATUS_SUCCESS:
                continue
            for method_name in grand_totals:
                grand_totals[method_name] += file_result.job_total_for(method_name)

        failed_count = sum(1 for file_result in file_results if file_result.status == JOB_STATUS_FAILED)
        status = JOB_STATUS_FAILED if failed_count else JOB_STATUS_SUCCESS
        timeline.append(
            domain_build_stage_event(
                stage="run",
                status="completed" if status == JOB_STATUS_SUCCESS else "failed",
                details={
                    "grand_totals": dict(grand_totals),
                    "failed_files": failed_count,
                    "failed_stages": domain_timeline_failed_stages(timeline),
                },
            )
        )

        return GainsReportResult(
            method=self._method,
            partitioned_by_asset=self._config.partition_by_asset,
            file_results=tuple(file_results),
            grand_totals=grand_totals,
            status=status,
            timeline=timeline,
        )

    def job_execute_transactions(
        self,
        transactions: Iterable[LedgerTransaction],
        source_label: str = "inline",
    ) -> FileGainsResult:
        """Run configured engines over an in-memory transaction sequence.

        Every engine gets its own fresh state over the same sequence.

        Args:
            transactions: Chronologically ordered transactions.
            source_label: Label reported for the source.

        Returns:
            FileGainsResult: Successful result holding one run per engine.

        Raises:
            ValueError: Raised when source_label is blank.
        """

        if not source_label.strip():
            raise ValueError("source_label must not be blank")

        ordered_transactions = tuple(transactions)
        runs: dict[str, LedgerRunResult] = {}
        for engine in ledger_resolve_engines(self._method):
            run_result = ledger_run_engine(
                engine=engine,
                transactions=ordered_transactions,
                partition_by_asset=self._config.partition_by_asset,
            )
            runs[run_result.method] = run_result

        return FileGainsResult(
            source_label=source_label,
            status=JOB_STATUS_SUCCESS,
            runs=runs,
            transaction_count=len(ordered_transactions),
        )

    def _job_process_file(self, file_path: str, timeline: list[dict[str, object]]) -> FileGainsResult:
        """Load one file and run engines, converting load failures into a failed result.

        Args:
            file_path: Statement file path.
            timeline: Run timeline receiving stage events.

        Returns:
            FileGainsResult: Success or failed result for the file.

        Raises:
            RuntimeError: Unexpected engine failures propagate unchanged.
        """

        timeline.append(domain_build_stage_event(stage="load", status="started", details={"file": file_path}))
        try:
            transactions = self._loader.loader_read_transactions(file_path)
        except LedgerLoadError as error:
            logger.error("load failed file=%s error=%s", file_path, error)
            timeline.append(
                domain_build_stage_event(
                    stage="load",
                    status="failed",
                    details={"file": file_path, "error": str(error)},
                )
            )
            return FileGainsResult(source_label=file_path, status=JOB_STATUS_FAILED, error_message=str(error))

        timeline.append(
            domain_build_stage_event(
                stage="load",
                status="completed",
                details={"file": file_path, "transactions": len(transactions)},
            )
        )

        file_result = self.job_execute_transactions(transactions=transactions, source_label=file_path)
        timeline.append(
            domain_build_stage_event(
                stage="compute",
                status="completed",
                details={
                    "file": file_path,
                    "totals": {method: run.total_realized_gain for method, run in file_result.runs.items()},
                },
            )
        )
        return file_result


__all__ = ["GainsReportConfig", "GainsReportOrchestrator"]

"""Regression tests for multi-file gains orchestration, totals and failure isolation."""

from __future__ import annotations

from pathlib import Path

import pytest

from gains_ledger.domain import LedgerTransaction, TransactionKind
from gains_ledger.jobs import JOB_STATUS_FAILED, JOB_STATUS_SUCCESS, GainsReportConfig, GainsReportOrchestrator
from gains_ledger.ledger import UnsupportedGainsMethodError
from gains_ledger.loader import LedgerLoadError


class _InMemoryLoaderStub:
    """Loader stub serving transactions per path and failing for unknown paths."""

    def __init__(self, sources: dict[str, list[LedgerTransaction]]) -> None:
        """Initialize stub sources.

        Args:
            sources: Transactions keyed by file path.

        Returns:
            None: Initializer does not return values.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self._sources = sources
        self.requested_paths: list[str] = []

    def loader_read_transactions(self, file_path: str) -> tuple[LedgerTransaction, ...]:
        """Return stored transactions or raise a load error.

        Args:
            file_path: Requested path.

        Returns:
            tuple[LedgerTransaction, ...]: Stored transactions.

        Raises:
            LedgerLoadError: Raised for paths without stored transactions.
        """

        self.requested_paths.append(file_path)
        if file_path not in self._sources:
            raise LedgerLoadError(f"cannot read file ({file_path})", file_path=file_path)
        return tuple(self._sources[file_path])


def _scenario_transactions() -> list[LedgerTransaction]:
    return [
        LedgerTransaction("1", "t1", "BTC", TransactionKind.BUY, 10, 10, 100),
        LedgerTransaction("2", "t2", "BTC", TransactionKind.BUY, 5, 12, 60),
        LedgerTransaction("3", "t3", "BTC", TransactionKind.SELL, 12, 20, 240),
    ]


def test_jobs_execute_files_accumulates_grand_totals_per_engine() -> None:
    """Sum per-file engine totals into grand totals across files.

    Returns:
        None: Assertions validate per-file and grand totals.

    Raises:
        AssertionError: Raised when totals are not accumulated per engine.
    """

    loader = _InMemoryLoaderStub(
        {
            "a.csv": _scenario_transactions(),
            "b.csv": [LedgerTransaction("9", "t9", "BTC", TransactionKind.SELL, 1, 50, 50)],
        }
    )
    orchestrator = GainsReportOrchestrator(config=GainsReportConfig(method="both"), loader=loader)

    result = orchestrator.job_execute_files(["a.csv", "b.csv"])

    assert result.status == JOB_STATUS_SUCCESS
    assert loader.requested_paths == ["a.csv", "b.csv"]
    first, second = result.file_results
    assert first.job_total_for("fifo") == pytest.approx(116)
    assert first.job_total_for("ma") == pytest.approx(112)
    assert second.job_total_for("fifo") == pytest.approx(50)
    assert result.grand_totals == pytest.approx({"fifo": 166, "ma": 162})


def test_jobs_execute_files_runs_only_requested_engine() -> None:
    """Run only the moving-average engine when `ma` is requested."""

    orchestrator = GainsReportOrchestrator(
        config=GainsReportConfig(method="ma"),
        loader=_InMemoryLoaderStub({"a.csv": _scenario_transactions()}),
    )

    result = orchestrator.job_execute_files(["a.csv"])

    assert list(result.grand_totals) == ["ma"]
    assert list(result.file_results[0].runs) == ["ma"]
    assert result.file_results[0].job_total_for("fifo") == 0.0


def test_jobs_execute_files_isolates_load_failures() -> None:
    """Mark an unreadable file failed, keep processing, and exclude it from totals.

    Returns:
        None: Assertions validate failure isolation and timeline events.

    Raises:
        AssertionError: Raised when one failure aborts the run or leaks into totals.
    """

    orchestrator = GainsReportOrchestrator(
        config=GainsReportConfig(method="fifo"),
        loader=_InMemoryLoaderStub({"good.csv": _scenario_transactions()}),
    )

    result = orchestrator.job_execute_files(["missing.csv", "good.csv"])

    assert result.status == JOB_STATUS_FAILED
    failed, succeeded = result.file_results
    assert failed.status == JOB_STATUS_FAILED
    assert failed.runs == {}
    assert "missing.csv" in (failed.error_message or "")
    assert succeeded.status == JOB_STATUS_SUCCESS
    assert result.grand_totals == pytest.approx({"fifo": 116})
    assert result.job_failed_sources() == ["missing.csv"]
    load_statuses = [event["status"] for event in result.timeline if event["stage"] == "load"]
    assert load_statuses == ["started", "failed", "started", "completed"]
    assert result.timeline[-1]["status"] == "failed"
    assert result.timeline[-1]["details"]["failed_stages"] == ["load"]


def test_jobs_execute_files_with_no_files_is_successful_and_zero() -> None:
    """Return zero grand totals for an empty file list."""

    orchestrator = GainsReportOrchestrator(config=GainsReportConfig(), loader=_InMemoryLoaderStub({}))

    result = orchestrator.job_execute_files([])

    assert result.status == JOB_STATUS_SUCCESS
    assert result.grand_totals == {"fifo": 0.0, "ma": 0.0}


def test_jobs_execute_transactions_partitions_when_configured() -> None:
    """Pass the partition policy through to every engine run."""

    orchestrator = GainsReportOrchestrator(config=GainsReportConfig(method="both", partition_by_asset=True))
    transactions = [
        LedgerTransaction("1", "t1", "BTC", TransactionKind.BUY, 1, 100, 100),
        LedgerTransaction("2", "t2", "ETH", TransactionKind.BUY, 1, 10, 10),
        LedgerTransaction("3", "t3", "ETH", TransactionKind.SELL, 1, 20, 20),
    ]

    file_result = orchestrator.job_execute_transactions(transactions, source_label="inline")

    assert file_result.transaction_count == 3
    for run_result in file_result.runs.values():
        assert run_result.partitioned_by_asset is True
        assert run_result.total_realized_gain == pytest.approx(10)


def test_jobs_orchestrator_reads_real_csv_files_with_default_loader(tmp_path: Path) -> None:
    """Run the default CSV loader end to end over a statement file.

    Returns:
        None: Assertions validate totals computed from disk.

    Raises:
        AssertionError: Raised when the default wiring differs.
    """

    statement = tmp_path / "statement.csv"
    statement.write_text(
        "Exchange statement\n"
        "Period: 2024\n"
        "order_id,timestamp,asset,kind,quantity,unit_price,gross_value\n"
        "1,t1,BTC,BUY,10,10,100\n"
        "2,t2,BTC,BUY,5,12,60\n"
        "3,t3,BTC,SELL,12,20,240\n",
        encoding="utf-8",
    )
    orchestrator = GainsReportOrchestrator(config=GainsReportConfig(method="both", skiprows=2))

    result = orchestrator.job_execute_files([str(statement)])

    assert result.grand_totals == pytest.approx({"fifo": 116, "ma": 112})


def test_jobs_orchestrator_marks_undecodable_file_failed_and_continues(tmp_path: Path) -> None:
    """Isolate a non-UTF-8 statement file instead of aborting the run.

    Returns:
        None: Assertions validate failure isolation for decode errors.

    Raises:
        AssertionError: Raised when the decode error aborts the run.
    """

    header = "order_id,timestamp,asset,kind,quantity,unit_price,gross_value\n"
    good_statement = tmp_path / "a_good.csv"
    good_statement.write_text(header + "1,t1,BTC,buy,1,10,10\n2,t2,BTC,sell,1,15,15\n", encoding="utf-8")
    legacy_statement = tmp_path / "b_cp874.csv"
    legacy_statement.write_bytes((header + "1,t1,BTC,ซื้อ,1,10,10\n").encode("cp874"))
    orchestrator = GainsReportOrchestrator(config=GainsReportConfig(method="fifo", skiprows=0))

    result = orchestrator.job_execute_files([str(good_statement), str(legacy_statement)])

    assert result.status == JOB_STATUS_FAILED
    assert result.job_failed_sources() == [str(legacy_statement)]
    assert result.grand_totals == pytest.approx({"fifo": 5})


def test_jobs_orchestrator_rejects_invalid_config() -> None:
    """Reject unsupported methods and negative skiprows at construction."""

    with pytest.raises(UnsupportedGainsMethodError):
        GainsReportOrchestrator(config=GainsReportConfig(method="lifo"))
    with pytest.raises(ValueError, match="skiprows"):
        GainsReportOrchestrator(config=GainsReportConfig(skiprows=-1))

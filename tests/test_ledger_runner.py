"""Regression tests for engine folds, method resolution and asset partitioning."""

from __future__ import annotations

import pytest

from gains_ledger.domain import LedgerTransaction, TransactionKind
from gains_ledger.ledger import (
    COMBINED_STREAM_KEY,
    FifoLedgerEngine,
    LedgerOutcome,
    MovingAverageLedgerEngine,
    UnsupportedGainsMethodError,
    ledger_normalize_method,
    ledger_partition_by_asset,
    ledger_resolve_engines,
    ledger_run_engine,
    ledger_sum_realized_gain,
)


def _txn(order_id: str, asset: str, kind: str, quantity: float, unit_price: float) -> LedgerTransaction:
    return LedgerTransaction(
        order_id=order_id,
        timestamp=f"2024-03-0{order_id}",
        asset=asset,
        kind=TransactionKind(kind),
        quantity=quantity,
        unit_price=unit_price,
        gross_value=quantity * unit_price,
    )


_MIXED_ASSET_STREAM = [
    _txn("1", "BTC", "buy", 1, 1000),
    _txn("2", "ETH", "buy", 10, 100),
    _txn("3", "BTC", "buy", 1, 2000),
    _txn("4", "ETH", "sell", 5, 150),
    _txn("5", "BTC", "sell", 1, 3000),
]


def test_ledger_resolve_engines_orders_fifo_before_ma() -> None:
    """Return fresh engines for each method in reporting order.

    Returns:
        None: Assertions validate engine selection.

    Raises:
        AssertionError: Raised when the engine set differs.
    """

    assert [engine.ledger_method_name() for engine in ledger_resolve_engines("both")] == ["fifo", "ma"]
    assert [engine.ledger_method_name() for engine in ledger_resolve_engines("FIFO")] == ["fifo"]
    assert [engine.ledger_method_name() for engine in ledger_resolve_engines(" ma ")] == ["ma"]


def test_ledger_normalize_method_rejects_unknown_method() -> None:
    """Reject methods outside the supported choices with the valid options listed."""

    with pytest.raises(UnsupportedGainsMethodError, match="fifo, ma, both"):
        ledger_normalize_method("lifo")


def test_ledger_run_engine_without_sales_totals_zero() -> None:
    """Report a zero total and no records when the stream holds only buys."""

    result = ledger_run_engine(FifoLedgerEngine(), [_txn("1", "BTC", "buy", 1, 10)])

    assert result.records == ()
    assert result.total_realized_gain == 0.0
    assert ledger_sum_realized_gain([]) == 0.0


def test_ledger_run_engine_engines_share_no_state_over_same_stream() -> None:
    """Run both engines over one sequence and get the documented scenario totals.

    Returns:
        None: Assertions validate independent engine runs.

    Raises:
        AssertionError: Raised when engine totals leak into each other.
    """

    stream = [
        LedgerTransaction("1", "t1", "BTC", TransactionKind.BUY, 10, 10, 100),
        LedgerTransaction("2", "t2", "BTC", TransactionKind.BUY, 5, 12, 60),
        LedgerTransaction("3", "t3", "BTC", TransactionKind.SELL, 12, 20, 240),
    ]

    fifo_result = ledger_run_engine(FifoLedgerEngine(), stream)
    ma_result = ledger_run_engine(MovingAverageLedgerEngine(), stream)

    assert fifo_result.total_realized_gain == pytest.approx(116)
    assert ma_result.total_realized_gain == pytest.approx(112)


def test_ledger_partition_by_asset_preserves_order_within_and_across_groups() -> None:
    """Group by asset, keeping per-asset order and first-appearance group order."""

    groups = ledger_partition_by_asset(_MIXED_ASSET_STREAM)

    assert list(groups) == ["BTC", "ETH"]
    assert [txn.order_id for txn in groups["BTC"]] == ["1", "3", "5"]
    assert [txn.order_id for txn in groups["ETH"]] == ["2", "4"]


def test_ledger_run_engine_combined_stream_interleaves_assets() -> None:
    """Match sales against any earlier lot when running one combined stream.

    Returns:
        None: Assertions validate the unpartitioned behaviour.

    Raises:
        AssertionError: Raised when combined matching differs.
    """

    result = ledger_run_engine(FifoLedgerEngine(), _MIXED_ASSET_STREAM)

    eth_sale, btc_sale = result.records
    # The ETH sale consumes the older BTC lot first in the combined stream.
    assert eth_sale.cost_basis == pytest.approx(1000 + 4 * 100)
    assert btc_sale.cost_basis == pytest.approx(100)
    assert list(result.final_states) == [COMBINED_STREAM_KEY]
    assert result.partitioned_by_asset is False


def test_ledger_run_engine_partitioned_streams_match_per_asset() -> None:
    """Match sales only against lots of the same asset when partitioning.

    Returns:
        None: Assertions validate per-asset records and final states.

    Raises:
        AssertionError: Raised when lots cross asset boundaries.
    """

    result = ledger_run_engine(FifoLedgerEngine(), _MIXED_ASSET_STREAM, partition_by_asset=True)

    btc_sale, eth_sale = result.records
    assert btc_sale.asset == "BTC"
    assert btc_sale.cost_basis == pytest.approx(1000)
    assert eth_sale.asset == "ETH"
    assert eth_sale.cost_basis == pytest.approx(500)
    assert result.total_realized_gain == pytest.approx(2000 + 250)
    assert set(result.final_states) == {"BTC", "ETH"}
    assert result.partitioned_by_asset is True


def test_ledger_run_result_counts_outcomes() -> None:
    """Count outcome names across the fold."""

    result = ledger_run_engine(
        MovingAverageLedgerEngine(),
        [
            _txn("1", "BTC", "buy", 1, 10),
            _txn("2", "BTC", "unknown", 1, 10),
            _txn("3", "BTC", "sell", 2, 10),
        ],
    )

    assert result.ledger_outcome_counts() == {
        LedgerOutcome.AVERAGE_UPDATED.value: 1,
        LedgerOutcome.KIND_IGNORED.value: 1,
        LedgerOutcome.SALE_BALANCE_CLAMPED.value: 1,
    }

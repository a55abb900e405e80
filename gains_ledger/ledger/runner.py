"""Engine fold helpers turning transaction streams into realized-gain runs."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
import logging
from typing import Any

from gains_ledger.domain import LedgerTransaction, RealizedGainRecord

from .average_engine import MOVING_AVERAGE_METHOD_NAME, MovingAverageLedgerEngine
from .fifo_engine import FIFO_METHOD_NAME, FifoLedgerEngine
from .interfaces import LedgerEnginePort, LedgerOutcome
from .partitioning import ledger_build_streams

logger = logging.getLogger(__name__)

BOTH_METHODS_NAME = "both"
GAINS_METHOD_CHOICES = (FIFO_METHOD_NAME, MOVING_AVERAGE_METHOD_NAME, BOTH_METHODS_NAME)


class UnsupportedGainsMethodError(ValueError):
    """Raised when a requested calculation method is not one of the supported choices."""


@dataclass(frozen=True)
class LedgerRunResult:
    """Output of one engine run over one source.

    Attributes:
        method: Engine method label (`fifo` or `ma`).
        records: Realized-gain records in sale order.
        total_realized_gain: Sum of record gains, 0 when there were no sales.
        outcomes: Step outcomes in processing order.
        final_states: Final engine state per input stream.
        partitioned_by_asset: Whether streams were split per asset.
    """

    method: str
    records: tuple[RealizedGainRecord, ...]
    total_realized_gain: float
    outcomes: tuple[LedgerOutcome, ...]
    final_states: dict[str, Any]
    partitioned_by_asset: bool = False

    def ledger_outcome_counts(self) -> dict[str, int]:
        """Count step outcomes by outcome name.

        Returns:
            dict[str, int]: Outcome value to occurrence count.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return dict(Counter(outcome.value for outcome in self.outcomes))


def ledger_normalize_method(method: str) -> str:
    """Validate and normalize one calculation method label.

    Args:
        method: Requested method (`fifo`, `ma`, or `both`), case-insensitive.

    Returns:
        str: Normalized method label.

    Raises:
        UnsupportedGainsMethodError: Raised when the method is not supported.
    """

    normalized_method = (method or "").strip().lower()
    if normalized_method not in GAINS_METHOD_CHOICES:
        raise UnsupportedGainsMethodError(
            f"Invalid value for method: {method}. Valid options are: {', '.join(GAINS_METHOD_CHOICES)}"
        )
    return normalized_method


def ledger_resolve_engines(method: str) -> tuple[LedgerEnginePort, ...]:
    """Build fresh engines for one calculation method.

    Args:
        method: Requested method (`fifo`, `ma`, or `both`).

    Returns:
        tuple[LedgerEnginePort, ...]: Engines in reporting order (FIFO first).

    Raises:
        UnsupportedGainsMethodError: Raised when the method is not supported.
    """

    normalized_method = ledger_normalize_method(method)
    engines: list[LedgerEnginePort] = []
    if normalized_method in (FIFO_METHOD_NAME, BOTH_METHODS_NAME):
        engines.append(FifoLedgerEngine())
    if normalized_method in (MOVING_AVERAGE_METHOD_NAME, BOTH_METHODS_NAME):
        engines.append(MovingAverageLedgerEngine())
    return tuple(engines)


def ledger_sum_realized_gain(records: Iterable[RealizedGainRecord]) -> float:
    """Sum realized gains across records.

    Args:
        records: Realized-gain records.

    Returns:
        float: Total realized gain, 0.0 for no records.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return sum((record.realized_gain for record in records), 0.0)


def ledger_run_engine(
    engine: LedgerEnginePort,
    transactions: Iterable[LedgerTransaction],
    partition_by_asset: bool = False,
) -> LedgerRunResult:
    """Fold one engine over a transaction sequence.

    Each stream starts from a fresh initial state. With `partition_by_asset`
    every asset gets its own stream and records are concatenated in the order
    assets first appear.

    Args:
        engine: Engine to run.
        transactions: Chronologically ordered transactions.
        partition_by_asset: Whether to run one stream per asset.

    Returns:
        LedgerRunResult: Records, total, outcomes and final states.

    Raises:
        ValueError: Raised when engine is None.
    """

    if engine is None:
        raise ValueError("engine must not be None")

    records: list[RealizedGainRecord] = []
    outcomes: list[LedgerOutcome] = []
    final_states: dict[str, Any] = {}

    for stream_key, stream in ledger_build_streams(transactions, partition_by_asset=partition_by_asset).items():
        state = engine.ledger_initial_state()
        for transaction in stream:
            step = engine.ledger_apply(transaction, state)
            state = step.state
            outcomes.append(step.outcome)
            if step.record is not None:
                records.append(step.record)
        final_states[stream_key] = state

    total_realized_gain = ledger_sum_realized_gain(records)
    logger.debug(
        "ledger run method=%s sales=%d total_realized_gain=%s",
        engine.ledger_method_name(),
        len(records),
        total_realized_gain,
    )
    return LedgerRunResult(
        method=engine.ledger_method_name(),
        records=tuple(records),
        total_realized_gain=total_realized_gain,
        outcomes=tuple(outcomes),
        final_states=final_states,
        partitioned_by_asset=partition_by_asset,
    )


__all__ = [
    "BOTH_METHODS_NAME",
    "GAINS_METHOD_CHOICES",
    "LedgerRunResult",
    "UnsupportedGainsMethodError",
    "ledger_normalize_method",
    "ledger_resolve_engines",
    "ledger_run_engine",
    "ledger_sum_realized_gain",
]

"""Ledger layer package for FIFO and moving-average cost-basis engines."""

from .interfaces import LedgerEnginePort, LedgerOutcome, LedgerStep
from .fifo_engine import FIFO_METHOD_NAME, FifoLedgerEngine, FifoLedgerState, FifoLot, fifo_apply, fifo_initial_state
from .average_engine import (
	MOVING_AVERAGE_METHOD_NAME,
	MovingAverageLedgerEngine,
	MovingAverageState,
	moving_average_apply,
	moving_average_initial_state,
)
from .partitioning import COMBINED_STREAM_KEY, ledger_build_streams, ledger_partition_by_asset
from .runner import (
	BOTH_METHODS_NAME,
	GAINS_METHOD_CHOICES,
	LedgerRunResult,
	UnsupportedGainsMethodError,
	ledger_normalize_method,
	ledger_resolve_engines,
	ledger_run_engine,
	ledger_sum_realized_gain,
)

__all__ = [
	"LedgerEnginePort",
	"LedgerOutcome",
	"LedgerStep",
	"FIFO_METHOD_NAME",
	"FifoLedgerEngine",
	"FifoLedgerState",
	"FifoLot",
	"fifo_apply",
	"fifo_initial_state",
	"MOVING_AVERAGE_METHOD_NAME",
	"MovingAverageLedgerEngine",
	"MovingAverageState",
	"moving_average_apply",
	"moving_average_initial_state",
	"COMBINED_STREAM_KEY",
	"ledger_build_streams",
	"ledger_partition_by_asset",
	"BOTH_METHODS_NAME",
	"GAINS_METHOD_CHOICES",
	"LedgerRunResult",
	"UnsupportedGainsMethodError",
	"ledger_normalize_method",
	"ledger_resolve_engines",
	"ledger_run_engine",
	"ledger_sum_realized_gain",
]

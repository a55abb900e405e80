"""FIFO lot-matching cost-basis engine."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging

from gains_ledger.domain import LedgerTransaction, TransactionKind, domain_build_realized_gain_record

from .interfaces import LedgerEnginePort, LedgerOutcome, LedgerStep

logger = logging.getLogger(__name__)

FIFO_METHOD_NAME = "fifo"

# Unmatched quantity at or below this share of the sale is float residue, not an oversell.
_FIFO_UNMATCHED_RELATIVE_TOLERANCE = 1e-9
# Consumed lots are dropped from the shared log once they outnumber open ones.
_FIFO_COMPACT_MIN_CONSUMED = 64


@dataclass(frozen=True)
class FifoLot:
    """Unconsumed buy tranche held in the FIFO queue.

    Attributes:
        remaining_quantity: Quantity not yet matched against sales.
        unit_cost: Cost per unit derived from the buy gross value.
    """

    remaining_quantity: float
    unit_cost: float


@dataclass(frozen=True, eq=False)
class FifoLedgerState:
    """FIFO engine state holding open lots oldest-first.

    Lots live in an append-only log shared by successive states. A state sees
    `log[start:end]`, with `front` standing in for `log[start]` once a sale has
    partly consumed it. The log is only appended to by the state that owns its
    tail, so earlier states never observe a change.

    Attributes:
        log: Shared append-only lot log.
        start: Index of the oldest open lot.
        end: Index one past the newest open lot.
        front: Partly consumed replacement for the oldest lot, if any.
    """

    log: list[FifoLot] = field(default_factory=list, repr=False)
    start: int = 0
    end: int = 0
    front: FifoLot | None = None

    @property
    def lots(self) -> tuple[FifoLot, ...]:
        """Return open lots oldest-first.

        Returns:
            tuple[FifoLot, ...]: Open lots, partly consumed front lot included.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        if self.start >= self.end:
            return ()
        window = self.log[self.start : self.end]
        if self.front is not None:
            window[0] = self.front
        return tuple(window)

    def fifo_open_quantity(self) -> float:
        """Return total unconsumed quantity across open lots.

        Returns:
            float: Sum of lot remaining quantities.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return sum(lot.remaining_quantity for lot in self.lots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FifoLedgerState):
            return NotImplemented
        return self.lots == other.lots

    __hash__ = None


def fifo_initial_state() -> FifoLedgerState:
    """Return an empty FIFO state.

    Returns:
        FifoLedgerState: State with no open lots.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return FifoLedgerState(log=[])


def fifo_apply(transaction: LedgerTransaction, state: FifoLedgerState) -> LedgerStep[FifoLedgerState]:
    """Apply one transaction to a FIFO state.

    Buys append a lot at the back of the queue. Sells consume lots from the
    front, splitting the front lot when it is only partly used. Sold quantity
    with no lot left to match is costed at zero.

    Args:
        transaction: Normalized transaction.
        state: Current FIFO state, left untouched.

    Returns:
        LedgerStep[FifoLedgerState]: New state, optional sale record and outcome.

    Raises:
        RuntimeError: This engine does not raise for data anomalies.
    """

    if transaction.kind is TransactionKind.BUY:
        return _fifo_apply_buy(transaction=transaction, state=state)
    if transaction.kind is TransactionKind.SELL:
        return _fifo_apply_sell(transaction=transaction, state=state)

    logger.debug("fifo ignored order_id=%s kind=%s", transaction.order_id, transaction.kind.value)
    return LedgerStep(state=state, record=None, outcome=LedgerOutcome.KIND_IGNORED)


def _fifo_apply_buy(transaction: LedgerTransaction, state: FifoLedgerState) -> LedgerStep[FifoLedgerState]:
    """Open one lot for a buy transaction.

    Args:
        transaction: Buy transaction.
        state: Current FIFO state.

    Returns:
        LedgerStep[FifoLedgerState]: State with the new lot appended.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if transaction.quantity != 0:
        unit_cost = transaction.gross_value / transaction.quantity
        outcome = LedgerOutcome.LOT_OPENED
    else:
        unit_cost = 0.0
        outcome = LedgerOutcome.ZERO_QUANTITY_BUY
        logger.debug("fifo zero-quantity buy order_id=%s", transaction.order_id)

    lot = FifoLot(remaining_quantity=transaction.quantity, unit_cost=unit_cost)
    if state.end == len(state.log):
        state.log.append(lot)
        new_state = FifoLedgerState(log=state.log, start=state.start, end=state.end + 1, front=state.front)
    else:
        # Another state already extended this log; branch onto a private copy.
        log = state.log[state.start : state.end]
        log.append(lot)
        new_state = FifoLedgerState(log=log, start=0, end=len(log), front=state.front)
    return LedgerStep(state=new_state, record=None, outcome=outcome)


def _fifo_apply_sell(transaction: LedgerTransaction, state: FifoLedgerState) -> LedgerStep[FifoLedgerState]:
    """Match one sell transaction against open lots oldest-first.

    Args:
        transaction: Sell transaction.
        state: Current FIFO state.

    Returns:
        LedgerStep[FifoLedgerState]: State with consumed lots removed or reduced.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    index = state.start
    front = state.front
    remaining = transaction.quantity
    cost_basis = 0.0

    while remaining > 0 and index < state.end:
        front_lot = front if front is not None else state.log[index]
        used = min(front_lot.remaining_quantity, remaining)
        if used == front_lot.remaining_quantity:
            index += 1
            front = None
        else:
            front = FifoLot(
                remaining_quantity=front_lot.remaining_quantity - used,
                unit_cost=front_lot.unit_cost,
            )
        cost_basis += front_lot.unit_cost * used
        remaining -= used

    outcome = LedgerOutcome.SALE_MATCHED
    if remaining > transaction.quantity * _FIFO_UNMATCHED_RELATIVE_TOLERANCE:
        outcome = LedgerOutcome.SALE_UNMATCHED_REMAINDER
        logger.warning(
            "fifo sale exceeds open lots order_id=%s unmatched_quantity=%s costed at zero",
            transaction.order_id,
            remaining,
        )

    record = domain_build_realized_gain_record(transaction=transaction, cost_basis=cost_basis)
    return LedgerStep(state=_fifo_compact(state.log, index, state.end, front), record=record, outcome=outcome)


def _fifo_compact(log: list[FifoLot], start: int, end: int, front: FifoLot | None) -> FifoLedgerState:
    """Build a post-sale state, dropping consumed lots once they dominate the log."""

    if start >= _FIFO_COMPACT_MIN_CONSUMED and start * 2 >= end:
        compacted_log = log[start:end]
        return FifoLedgerState(log=compacted_log, start=0, end=len(compacted_log), front=front)
    return FifoLedgerState(log=log, start=start, end=end, front=front)


class FifoLedgerEngine(LedgerEnginePort[FifoLedgerState]):
    """Concrete FIFO engine exposing the ledger engine port."""

    def ledger_method_name(self) -> str:
        """Return FIFO method label.

        Returns:
            str: `fifo`.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return FIFO_METHOD_NAME

    def ledger_initial_state(self) -> FifoLedgerState:
        """Return empty FIFO state.

        Returns:
            FifoLedgerState: State with no open lots.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return fifo_initial_state()

    def ledger_apply(self, transaction: LedgerTransaction, state: FifoLedgerState) -> LedgerStep[FifoLedgerState]:
        """Apply one transaction with FIFO matching.

        Args:
            transaction: Normalized transaction.
            state: Current FIFO state.

        Returns:
            LedgerStep[FifoLedgerState]: FIFO step result.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return fifo_apply(transaction=transaction, state=state)


__all__ = [
    "FIFO_METHOD_NAME",
    "FifoLedgerEngine",
    "FifoLedgerState",
    "FifoLot",
    "fifo_apply",
    "fifo_initial_state",
]

"""Moving-average cost-basis engine."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from gains_ledger.domain import LedgerTransaction, TransactionKind, domain_build_realized_gain_record

from .interfaces import LedgerEnginePort, LedgerOutcome, LedgerStep

logger = logging.getLogger(__name__)

MOVING_AVERAGE_METHOD_NAME = "ma"


@dataclass(frozen=True)
class MovingAverageState:
    """Moving-average engine state.

    Attributes:
        balance: Quantity currently held, never negative.
        avg_unit_cost: Weighted-average cost per held unit.
    """

    balance: float = 0.0
    avg_unit_cost: float = 0.0


def moving_average_initial_state() -> MovingAverageState:
    """Return an empty moving-average state."""

    return MovingAverageState()


def moving_average_apply(
    transaction: LedgerTransaction,
    state: MovingAverageState,
) -> LedgerStep[MovingAverageState]:
    """Apply one transaction to a moving-average state.

    Buys fold their gross value into the running average. Sells are costed at
    the current average, which they never change; the balance is floored at
    zero when more is sold than held.

    Args:
        transaction: Normalized transaction.
        state: Current moving-average state.

    Returns:
        LedgerStep[MovingAverageState]: New state, optional sale record and outcome.

    Raises:
        RuntimeError: This engine does not raise for data anomalies.
    """

    if transaction.kind is TransactionKind.BUY:
        old_total_cost = state.balance * state.avg_unit_cost
        new_total_cost = old_total_cost + transaction.gross_value
        new_balance = state.balance + transaction.quantity
        new_avg = new_total_cost / new_balance if new_balance > 0 else 0.0

        outcome = LedgerOutcome.AVERAGE_UPDATED
        if transaction.quantity == 0:
            outcome = LedgerOutcome.ZERO_QUANTITY_BUY
            logger.debug("ma zero-quantity buy order_id=%s", transaction.order_id)
        return LedgerStep(
            state=MovingAverageState(balance=new_balance, avg_unit_cost=new_avg),
            record=None,
            outcome=outcome,
        )

    if transaction.kind is TransactionKind.SELL:
        avg_unit_cost = state.avg_unit_cost
        new_balance = state.balance - transaction.quantity
        outcome = LedgerOutcome.SALE_MATCHED
        if new_balance < 0:
            # Overselling floors the balance; the average is kept.
            logger.warning(
                "ma sale exceeds balance order_id=%s balance=%s quantity=%s",
                transaction.order_id,
                state.balance,
                transaction.quantity,
            )
            new_balance = 0.0
            outcome = LedgerOutcome.SALE_BALANCE_CLAMPED

        record = domain_build_realized_gain_record(
            transaction=transaction,
            cost_basis=avg_unit_cost * transaction.quantity,
            average_unit_cost=avg_unit_cost,
        )
        return LedgerStep(
            state=MovingAverageState(balance=new_balance, avg_unit_cost=avg_unit_cost),
            record=record,
            outcome=outcome,
        )

    logger.debug("ma ignored order_id=%s kind=%s", transaction.order_id, transaction.kind.value)
    return LedgerStep(state=state, record=None, outcome=LedgerOutcome.KIND_IGNORED)


class MovingAverageLedgerEngine(LedgerEnginePort[MovingAverageState]):
    """Concrete moving-average engine exposing the ledger engine port."""

    def ledger_method_name(self) -> str:
        """Return moving-average method label.

        Returns:
            str: `ma`.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return MOVING_AVERAGE_METHOD_NAME

    def ledger_initial_state(self) -> MovingAverageState:
        return moving_average_initial_state()

    def ledger_apply(
        self,
        transaction: LedgerTransaction,
        state: MovingAverageState,
    ) -> LedgerStep[MovingAverageState]:
        return moving_average_apply(transaction=transaction, state=state)


__all__ = [
    "MOVING_AVERAGE_METHOD_NAME",
    "MovingAverageLedgerEngine",
    "MovingAverageState",
    "moving_average_apply",
    "moving_average_initial_state",
]

"""Typed interfaces for ledger-layer cost-basis computations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar

from gains_ledger.domain import LedgerTransaction, RealizedGainRecord

StateT = TypeVar("StateT")


class LedgerOutcome(str, Enum):
    """Named path taken by one engine step, including silent fallbacks."""

    LOT_OPENED = "lot_opened"
    AVERAGE_UPDATED = "average_updated"
    ZERO_QUANTITY_BUY = "zero_quantity_buy"
    SALE_MATCHED = "sale_matched"
    SALE_UNMATCHED_REMAINDER = "sale_unmatched_remainder"
    SALE_BALANCE_CLAMPED = "sale_balance_clamped"
    KIND_IGNORED = "kind_ignored"


@dataclass(frozen=True)
class LedgerStep(Generic[StateT]):
    """Result of applying one transaction to one engine state.

    Attributes:
        state: New engine state after the transaction.
        record: Realized-gain record for sells, None otherwise.
        outcome: Named path taken by the step.
    """

    state: StateT
    record: RealizedGainRecord | None
    outcome: LedgerOutcome


class LedgerEnginePort(Protocol[StateT]):
    """Port definition for a pure cost-basis reducer."""

    def ledger_method_name(self) -> str:
        """Return method label for the engine (`fifo` or `ma`).

        Returns:
            str: Method identifier.

        Raises:
            RuntimeError: Raised when method metadata is unavailable.
        """

    def ledger_initial_state(self) -> StateT:
        """Return the empty engine state.

        Returns:
            StateT: Fresh state with no holdings.

        Raises:
            RuntimeError: Raised when state cannot be created.
        """

    def ledger_apply(self, transaction: LedgerTransaction, state: StateT) -> LedgerStep[StateT]:
        """Apply one transaction to a state without mutating it.

        Args:
            transaction: Normalized transaction.
            state: Current engine state.

        Returns:
            LedgerStep[StateT]: New state, optional record and outcome.

        Raises:
            RuntimeError: Engines absorb anomalies and do not raise for data values.
        """

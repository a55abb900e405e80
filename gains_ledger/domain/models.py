"""Typed domain models shared across runtime layers.

This module provides the normalized transaction and realized-gain contracts
exchanged between the loader, the accounting engines, and the reporting
surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransactionKind(str, Enum):
    """Normalized ledger transaction kind.

    `UNKNOWN` carries source kinds the engines do not account for, so they can
    be skipped explicitly instead of failing the stream.
    """

    BUY = "buy"
    SELL = "sell"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class LedgerTransaction:
    """Normalized transaction contract consumed by accounting engines.

    Attributes:
        order_id: Source order identifier.
        timestamp: Opaque ordering key copied from the source row.
        asset: Asset symbol or ticker.
        kind: Normalized transaction kind.
        quantity: Traded quantity.
        unit_price: Execution price per unit.
        gross_value: Source-supplied trade value used as cost basis for buys.
    """

    order_id: str
    timestamp: str
    asset: str
    kind: TransactionKind
    quantity: float
    unit_price: float
    gross_value: float


@dataclass(frozen=True)
class RealizedGainRecord:
    """Realized-gain output row produced for one sell transaction.

    Attributes:
        order_id: Source order identifier of the sale.
        timestamp: Sale ordering key.
        asset: Asset symbol or ticker.
        sold_quantity: Quantity sold.
        sale_unit_price: Sale execution price per unit.
        proceeds: `sale_unit_price * sold_quantity`.
        cost_basis: Cost assigned to the sold quantity.
        realized_gain: `proceeds - cost_basis`.
        average_unit_cost: Moving-average unit cost applied to the sale, None for FIFO rows.
    """

    order_id: str
    timestamp: str
    asset: str
    sold_quantity: float
    sale_unit_price: float
    proceeds: float
    cost_basis: float
    realized_gain: float
    average_unit_cost: float | None = None


def domain_build_realized_gain_record(
    transaction: LedgerTransaction,
    cost_basis: float,
    average_unit_cost: float | None = None,
) -> RealizedGainRecord:
    """Build one realized-gain record for a sale with a resolved cost basis.

    Args:
        transaction: Sell transaction being realized.
        cost_basis: Cost assigned to the sold quantity.
        average_unit_cost: Optional moving-average unit cost applied to the sale.

    Returns:
        RealizedGainRecord: Record satisfying the proceeds and gain identities.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    proceeds = transaction.unit_price * transaction.quantity
    return RealizedGainRecord(
        order_id=transaction.order_id,
        timestamp=transaction.timestamp,
        asset=transaction.asset,
        sold_quantity=transaction.quantity,
        sale_unit_price=transaction.unit_price,
        proceeds=proceeds,
        cost_basis=cost_basis,
        realized_gain=proceeds - cost_basis,
        average_unit_cost=average_unit_cost,
    )


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str

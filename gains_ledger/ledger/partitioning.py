"""Asset partitioning helpers for per-asset engine runs.

Engines treat their input as one stream regardless of asset symbol. Callers
that want per-asset cost bases split the stream here before running engines.
"""

from __future__ import annotations

from collections.abc import Iterable

from gains_ledger.domain import LedgerTransaction

COMBINED_STREAM_KEY = "*"


def ledger_partition_by_asset(
    transactions: Iterable[LedgerTransaction],
) -> dict[str, tuple[LedgerTransaction, ...]]:
    """Group transactions by asset symbol.

    Relative order inside each group is preserved, and groups appear in the
    order their asset was first seen.

    Args:
        transactions: Chronologically ordered transactions.

    Returns:
        dict[str, tuple[LedgerTransaction, ...]]: Ordered per-asset streams.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    grouped: dict[str, list[LedgerTransaction]] = {}
    for transaction in transactions:
        grouped.setdefault(transaction.asset, []).append(transaction)
    return {asset: tuple(asset_transactions) for asset, asset_transactions in grouped.items()}


def ledger_build_streams(
    transactions: Iterable[LedgerTransaction],
    partition_by_asset: bool,
) -> dict[str, tuple[LedgerTransaction, ...]]:
    """Build engine input streams for the requested partitioning policy.

    Args:
        transactions: Chronologically ordered transactions.
        partition_by_asset: Whether to split the input into per-asset streams.

    Returns:
        dict[str, tuple[LedgerTransaction, ...]]: One stream keyed by
        `COMBINED_STREAM_KEY` when not partitioning, else one stream per asset.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if partition_by_asset:
        return ledger_partition_by_asset(transactions)
    return {COMBINED_STREAM_KEY: tuple(transactions)}


__all__ = ["COMBINED_STREAM_KEY", "ledger_build_streams", "ledger_partition_by_asset"]
